"""Locally cached list of the signed-in user's personal records.

Consistency rules:

  - ``create`` never appends locally; it reloads the whole list so
    server-assigned fields (id, defaults) are what the UI shows.
  - ``update`` and ``delete`` change the local list only after the store
    confirmed the write.
  - Any failure leaves the list as it was, records a notice and re-raises.
    Nothing is retried.
  - A failed reload after a successful insert is reported but not raised;
    the row exists, so the caller must not treat the create as failed.
  - Every operation runs as the signed-in user. An explicit owner that is
    not that user is refused before the store is touched.
"""

from typing import Any, Optional, Protocol, Sequence

from loguru import logger
from pydantic import ValidationError as SchemaValidationError

from prtracker.client.notices import Notice, failure
from prtracker.client.record_form import FormState, RecordForm, RecordPayload
from prtracker.client.session import SessionContext
from prtracker.core.errors import AuthRequiredError, FetchError, ValidationError, WriteError
from prtracker.schemas.auth import AuthSession
from prtracker.schemas.record import RecordCreate, RecordRead, RecordUpdate


class RecordStore(Protocol):
    """What the collection needs from persistence.

    Implemented by ``PersonalRecordRepository`` (in-process SQL) and by
    ``RecordsClient`` (HTTP).
    """

    def list_for_owner(self, owner: str) -> Sequence[Any]: ...

    def insert(self, owner: str, payload: RecordCreate) -> Any: ...

    def update(self, record_id: str, owner: str, fields: RecordUpdate) -> Any: ...

    def delete(self, record_id: str, owner: str) -> None: ...


class RecordCollection:
    def __init__(self, store: RecordStore, session: SessionContext):
        self.store = store
        self.session = session
        self.records: list[RecordRead] = []
        self.notices: list[Notice] = []
        self.loading = False
        self.active_form: Optional[RecordForm] = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    def close(self) -> None:
        self._unsubscribe()

    def _on_session_change(self, session: Optional[AuthSession]) -> None:
        if session is None:
            self.records = []
            if self.active_form is not None:
                self.active_form.cancel()
                self.active_form = None

    def _owner(self, owner: Optional[str]) -> str:
        try:
            user_id = self.session.require().user_id
            if owner and owner != user_id:
                raise AuthRequiredError("Cannot access another user's records")
        except AuthRequiredError as e:
            self.notices.append(failure("Authentication required", e))
            raise
        return user_id

    def find(self, record_id: str) -> Optional[RecordRead]:
        return next((r for r in self.records if r.id == record_id), None)

    # -- store operations ---------------------------------------------------

    def load(self, owner: Optional[str] = None) -> list[RecordRead]:
        """Replace the local list with the owner's records from the store."""
        owner = self._owner(owner)
        self.loading = True
        try:
            rows = self.store.list_for_owner(owner)
            records = [RecordRead.model_validate(row) for row in rows]
        except SchemaValidationError as e:
            logger.error(f"Malformed record rows for {owner}: {e}")
            error = FetchError("Could not read personal records")
            self.notices.append(failure("Error fetching records", error))
            raise error from e
        except FetchError as e:
            logger.error(f"Error fetching records: {e.message}")
            self.notices.append(failure("Error fetching records", e))
            raise
        finally:
            self.loading = False

        self.records = records
        return self.records

    def create(self, owner: Optional[str], payload: RecordCreate) -> list[RecordRead]:
        owner = self._owner(owner)
        try:
            self.store.insert(owner, payload)
        except WriteError as e:
            logger.error(f"Error adding record: {e.message}")
            self.notices.append(failure("Error adding record", e))
            raise
        try:
            return self.load(owner)
        except FetchError:
            # Insert committed; load() already recorded the notice
            logger.warning(f"Record added for {owner} but the list could not be refreshed")
            return self.records

    def update(self, record_id: str, owner: Optional[str], fields: RecordUpdate) -> Optional[RecordRead]:
        owner = self._owner(owner)
        try:
            self.store.update(record_id, owner, fields)
        except WriteError as e:
            logger.error(f"Error updating record {record_id}: {e.message}")
            self.notices.append(failure("Error updating record", e))
            raise

        changes = fields.changes()
        for i, record in enumerate(self.records):
            if record.id == record_id:
                self.records[i] = record.model_copy(update=changes)
                return self.records[i]
        return None

    def delete(self, record_id: str, owner: Optional[str]) -> None:
        owner = self._owner(owner)
        try:
            self.store.delete(record_id, owner)
        except WriteError as e:
            logger.error(f"Error deleting record {record_id}: {e.message}")
            self.notices.append(failure("Error deleting record", e))
            raise

        self.records = [r for r in self.records if r.id != record_id]

    # -- forms --------------------------------------------------------------

    def _open(self, form: RecordForm) -> RecordForm:
        # One form in editing per list
        if self.active_form is not None and self.active_form is not form:
            self.active_form.cancel()
        form.start_editing()
        self.active_form = form
        return form

    def begin_add(self) -> RecordForm:
        return self._open(RecordForm())

    def begin_edit(self, record_id: str) -> RecordForm:
        record = self.find(record_id)
        if record is None:
            raise ValidationError("Record not found")
        return self._open(RecordForm(record))

    def save(self, form: Optional[RecordForm] = None) -> RecordPayload:
        """Submit `form` (default: the active form) through create/update."""
        form = form or self.active_form
        if form is None:
            raise ValidationError("No record is being edited")
        owner = self._owner(None)

        def commit(payload: RecordPayload) -> None:
            if form.is_new:
                self.create(owner, payload)
            else:
                self.update(form.record_id, owner, payload)

        try:
            payload = form.submit(commit)
        except ValidationError as e:
            self.notices.append(failure("Invalid record", e))
            raise

        if form is self.active_form and form.state is FormState.idle:
            self.active_form = None
        return payload
