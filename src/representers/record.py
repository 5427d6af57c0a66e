"""Representer for record-backed (SQLAlchemy) models.

Makes the record's ``id`` and ``to_param`` available on the representer and
derives DOM ids from the record's class and key.  Pair it with
:class:`~representers.record_identifier.RecordMixin` on the model, which
provides ``to_param``.
"""

from __future__ import annotations

from representers import record_identifier
from representers.base import Representer


class RecordRepresenter(Representer, representer_name="Representers.Record"):
    """Representer whose model is a database record."""

    def dom_id(self, prefix: str | None = None) -> str:
        """DOM id for the record, e.g. ``book_5`` or ``new_book``."""
        return record_identifier.dom_id(self.model, prefix)

    def dom_class(self, prefix: str | None = None) -> str:
        return record_identifier.dom_class(self.model, prefix)


RecordRepresenter.model_reader("id", "to_param")
