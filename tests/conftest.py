import os
import tempfile

# Keep logs and config written during tests out of the real data directory. Must run before anything imports ww.
os.environ.setdefault("WERKWISE_HOME", tempfile.mkdtemp(prefix="werkwise-tests-"))
