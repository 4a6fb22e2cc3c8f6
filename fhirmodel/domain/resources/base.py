"""Resource base classes.

``Resource`` carries the fields every resource has; ``DomainResource`` adds the
narrative, contained resources and extensions. Concrete resources set
``type_name`` to their ``resourceType``.
"""

from typing import ClassVar, Optional

from fhirmodel.domain import value_sets as vs
from fhirmodel.domain.datatypes import PREFERRED, Extension, Meta, Narrative
from fhirmodel.domain.metadata import UNBOUNDED, element
from fhirmodel.domain.record import RESOURCE_KIND, Record


class Resource(Record):
    is_resource: ClassVar[bool] = True

    id: Optional[str] = element("id", description="Logical id of this artifact")
    meta: Optional[Meta] = element("Meta", description="Metadata about the resource")
    implicit_rules: Optional[str] = element("uri", description="A set of rules under which this content was created")
    language: Optional[str] = element(
        "code", binding=vs.LANGUAGES.bind(PREFERRED), description="Language of the resource content"
    )


class DomainResource(Resource):
    text: Optional[Narrative] = element("Narrative", description="Text summary of the resource, for human interpretation")
    contained: list["DomainResource"] = element(
        RESOURCE_KIND, max=UNBOUNDED, description="Contained, inline Resources"
    )
    extension: list[Extension] = element(
        "Extension", max=UNBOUNDED, description="Additional content defined by implementations"
    )
    modifier_extension: list[Extension] = element(
        "Extension", max=UNBOUNDED, description="Extensions that cannot be ignored"
    )


DomainResource.model_rebuild()
