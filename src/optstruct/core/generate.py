import logging

from optstruct.core.attrs import OwnerKind, filter_attrs
from optstruct.core.fields import generate_fields
from optstruct.models import Record, TransformConfig

logger = logging.getLogger(__name__)


def generate(original: Record, config: TransformConfig) -> Record:
    """Derive the optional version of ``original``.

    Generics and the where clause are carried over untouched. Raises
    ``ShapeMismatchError`` or ``TypeConstructionError``; no partial record is
    ever returned.
    """
    logger.debug("Generating %s from %s", config.name, original.name)

    shape = generate_fields(original.shape, config, owner=original.name)

    return original.model_copy(
        update={
            "name": config.name,
            "visibility": config.final_visibility(original.visibility),
            "attrs": filter_attrs(OwnerKind.RECORD, original.attrs, config.attribute_rules),
            "shape": shape,
        }
    )
