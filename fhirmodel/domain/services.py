"""Record Validation Service.

This module provides the RecordValidator class responsible for walking a record
and everything nested in it (backbone elements, datatypes, contained resources)
and collecting data-quality findings:

    - required fields that are absent (error)
    - coded values outside their bound value set (severity by binding strength)

Architecture:
    - Pure domain service; findings are returned, never raised
    - Paths are built from wire names with list indices,
      e.g. ``Claim.item[0].productOrService``
"""

import logging
from typing import Optional

from fhirmodel.domain.bindings import check_binding
from fhirmodel.domain.enums import Severity, ViolationKind
from fhirmodel.domain.ports import Violation
from fhirmodel.domain.record import Record

logger = logging.getLogger(__name__)


class RecordValidator:
    """Collects violations for a record tree."""

    def validate(self, record: Record, path: Optional[str] = None) -> list[Violation]:
        """Validate ``record`` and everything it contains.

        Parameters:
            record: Record to check
            path: Path prefix; defaults to the record's type name

        Returns:
            list[Violation]: Findings in traversal order
        """
        path = path or record.type_name
        violations = self._missing_required(record, path)

        for descriptor, value in record.populated():
            items = value if isinstance(value, list) else [value]
            for index, item in enumerate(items):
                item_path = f"{path}.{descriptor.name}"
                if isinstance(value, list):
                    item_path += f"[{index}]"
                if descriptor.binding is not None:
                    violation = check_binding(descriptor.binding, item, item_path, descriptor.name)
                    if violation is not None:
                        violations.append(violation)
                if isinstance(item, Record):
                    violations.extend(self.validate(item, item_path))

        if path == record.type_name and violations:
            logger.debug(f"{record.type_name}: {len(violations)} finding(s)")
        return violations

    @staticmethod
    def _missing_required(record: Record, path: str) -> list[Violation]:
        return [
            Violation(
                kind=ViolationKind.MISSING_REQUIRED_FIELD,
                severity=Severity.ERROR,
                path=f"{path}.{name}",
                field=name,
                message=f"required field {name} is missing",
            )
            for name in record.missing_required()
        ]
