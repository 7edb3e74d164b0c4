# Base for every error the package raises on purpose. Expected conditions (bad persisted timer state, unknown roles,
# missing module switches) are never errors and never end up here.
class WerkWiseError(Exception):
    pass

# Raised by the timer codec when a persisted payload isn't a JSON object at all.
class TimerCodecError(WerkWiseError):
    pass

class RecordNotFoundError(WerkWiseError):
    def __init__(self, collection, record_id):
        super().__init__(f"No record with id '{record_id}' in collection '{collection}'")
        self.collection = collection
        self.record_id = record_id

# Raised when a booking is saved without the fields a time registration needs.
class BookingError(WerkWiseError):
    pass
