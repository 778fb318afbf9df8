from collections.abc import Sequence
from enum import Enum

from optstruct.models import Attribute, AttributeRules, AttrsMode, AttrsRule, DocMode

# Attribute that marks a struct for generation; never copied to the output.
MARKER = "optstruct"


class OwnerKind(str, Enum):
    RECORD = "record"
    FIELD = "field"


def _select(
    existing: Sequence[Attribute],
    rule: AttrsRule | None,
    keep_doc: bool,
    custom_doc: str | None = None,
) -> tuple[Attribute, ...]:
    keep_other = rule is not None and rule.mode in (AttrsMode.KEEP, AttrsMode.ADD)

    selected = [
        attr for attr in existing if attr.path != MARKER and (keep_doc if attr.is_doc else keep_other)
    ]
    if rule is not None and rule.mode in (AttrsMode.REPLACE, AttrsMode.ADD):
        selected.extend(rule.attrs)
    if custom_doc is not None:
        selected.append(Attribute.doc(f" {custom_doc}" if custom_doc else custom_doc))
    return tuple(selected)


def filter_attrs(owner: OwnerKind, existing: Sequence[Attribute], rules: AttributeRules) -> tuple[Attribute, ...]:
    """Compute the attributes carried by a generated struct or field.

    Kept attributes stay in their original order; injected ones are appended.
    Doc attributes are governed by the doc options only, everything else by
    the attrs options.
    """
    if owner is OwnerKind.FIELD:
        return _select(existing, rules.field_attrs, keep_doc=rules.field_doc)

    doc = rules.doc
    return _select(
        existing,
        rules.attrs,
        keep_doc=doc is not None and doc.mode is DocMode.SAME,
        custom_doc=doc.text if doc is not None and doc.mode is DocMode.CUSTOM else None,
    )
