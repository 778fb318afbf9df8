from optstruct.models import InvalidType, PathSegment, PathType, TypeDescriptor

OPTION = "Option"


def is_option(ty: TypeDescriptor) -> bool:
    """Return True when ``ty`` is spelled as ``Option<...>``.

    Only the first path segment is compared against ``Option``. Aliases and
    re-exports are not resolved, and generic arguments are ignored.
    """
    if isinstance(ty, PathType) and ty.segments:
        return ty.segments[0].ident == OPTION
    return False


def wrap_option(ty: TypeDescriptor) -> PathType:
    if isinstance(ty, InvalidType):
        raise ValueError(f"unparseable type `{ty.text}`" if ty.text else "missing type")
    return PathType(segments=(PathSegment(ident=OPTION, args=(ty,)),))
