import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from ww.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attaches the handler under the given name, unless the logger already carries one by that name. Keeps repeated
# get_logger() calls from stacking duplicate handlers.
def _attach(logger: logging.Logger, handler_name: str, build_handler, level, fmt) -> bool:
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = build_handler()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True

# Keep only the newest `keep` per-run debug logs.
def _prune_debug_runs(debug_dir: Path, name: str, keep: int):
    runs = sorted(debug_dir.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for run in runs[keep:]:
        try: run.unlink()
        except OSError: pass

def get_logger(
        name = "werkwise",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    # Rotating log that survives across runs
    if persistent:
        _attach(logger, f"{name}:persistent",
                lambda: RotatingFileHandler(log_dir / f"{name}.log", maxBytes=max_bytes,
                                            backupCount=backup_count, encoding="utf-8"),
                level, fmt)

    # latest.log only ever holds the current run
    _attach(logger, f"{name}:latest",
            lambda: logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8"),
            level, fmt)

    # Full DEBUG output for each run gets its own file under logs/debug
    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True, exist_ok=True)
        run_path = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        added = _attach(logger, f"{name}:historical_debug",
                        lambda: logging.FileHandler(run_path, encoding="utf-8"),
                        logging.DEBUG, fmt)
        if added:
            _prune_debug_runs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

# WERKWISE_CONSOLE_LOG=1 mirrors the log to stderr, handy when running from a terminal.
log = get_logger(level=logging.DEBUG,
                 console=os.getenv("WERKWISE_CONSOLE_LOG") == "1",
                 historical_debugs=10)
log.info("=== INITIALIZED NEW SESSION ===")
