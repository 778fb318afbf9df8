import logging

from optstruct.core.attrs import OwnerKind, filter_attrs
from optstruct.core.errors import ShapeMismatchError, TypeConstructionError
from optstruct.core.types import is_option, wrap_option
from optstruct.models import Field, NamedFields, NoFields, RecordShape, TransformConfig, UnnamedFields

logger = logging.getLogger(__name__)


def merge_fields(shape: RecordShape, additional: RecordShape | None) -> RecordShape:
    """Append ``additional`` to ``shape``.

    A struct without fields takes the additional fragment as is. Named fields
    only merge with named fields and unnamed with unnamed.
    """
    if additional is None or not additional.fields:
        return shape
    if isinstance(shape, NoFields):
        return additional

    if isinstance(shape, NamedFields) and isinstance(additional, NamedFields):
        return shape.model_copy(update={"fields": shape.fields + additional.fields})
    if isinstance(shape, UnnamedFields) and isinstance(additional, UnnamedFields):
        return shape.model_copy(update={"fields": shape.fields + additional.fields})

    expected = "named" if isinstance(shape, NamedFields) else "unnamed"
    raise ShapeMismatchError(f"expected {expected} fields", span=additional.span)


def rewrite_field(field: Field, config: TransformConfig, owner: str) -> Field:
    update: dict[str, object] = {
        "attrs": filter_attrs(OwnerKind.FIELD, field.attrs, config.attribute_rules),
    }

    if config.visibility is not None:
        update["visibility"] = config.visibility

    if is_option(field.ty) and not config.rewrap:
        logger.debug("Field %s of %s is already optional", field.name or "<unnamed>", owner)
    else:
        try:
            update["ty"] = wrap_option(field.ty)
        except ValueError as exc:
            raise TypeConstructionError(owner, exc, span=field.ty.span or field.span, field=field) from exc

    return field.model_copy(update=update)


def generate_fields(shape: RecordShape, config: TransformConfig, owner: str) -> RecordShape:
    """Merge additional fields and wrap every field type in ``Option``.

    ``owner`` is the name of the original struct, used in error messages.
    """
    merged = merge_fields(shape, config.additional_fields)
    if isinstance(merged, NoFields):
        return merged

    logger.debug("Rewriting %d %s field(s) of %s", len(merged.fields), merged.kind, owner)
    return merged.model_copy(update={"fields": tuple(rewrite_field(field, config, owner) for field in merged.fields)})
