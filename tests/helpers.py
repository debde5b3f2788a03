from serion.core.models.instance import ObjectInstance
from serion.core.models.schema import FieldDescriptor, FieldKind, TypeDescriptor
from serion.core.schema.registry import SchemaRegistry

MOVIE = TypeDescriptor(
    type_id="Movie",
    version=1,
    fields=(
        FieldDescriptor("title", FieldKind.String),
        FieldDescriptor("director", FieldKind.String),
        FieldDescriptor("year", FieldKind.Int64),
        FieldDescriptor("rating", FieldKind.Float64),
    ),
)

ACCOUNT = TypeDescriptor(
    type_id="Account",
    version=1,
    fields=(
        FieldDescriptor("id", FieldKind.String),
        FieldDescriptor("balance", FieldKind.Float64),
        FieldDescriptor("pin", FieldKind.String, included=False),
    ),
)

BANK_ACCOUNT = TypeDescriptor(
    type_id="BankAccount",
    version=7,
    fields=(
        FieldDescriptor("accountNumber", FieldKind.String),
        FieldDescriptor("accountHolder", FieldKind.String),
        FieldDescriptor("balance", FieldKind.Float64),
        FieldDescriptor("pin", FieldKind.String, included=False),
        FieldDescriptor("lastAccessTime", FieldKind.Float64, included=False),
        FieldDescriptor("active", FieldKind.Bool),
    ),
)

CATALOG = TypeDescriptor(
    type_id="Catalog",
    version=1,
    fields=(
        FieldDescriptor("name", FieldKind.String),
        FieldDescriptor("movies", FieldKind.ObjectRefList),
        FieldDescriptor("featured", FieldKind.ObjectRef),
    ),
)

PERSON = TypeDescriptor(
    type_id="Person",
    version=2,
    fields=(
        FieldDescriptor("name", FieldKind.String),
        FieldDescriptor("friend", FieldKind.ObjectRef),
        FieldDescriptor("secret_friend", FieldKind.ObjectRef, included=False),
        FieldDescriptor("contacts", FieldKind.ObjectRefList),
    ),
)

ALL_TYPES = (MOVIE, ACCOUNT, BANK_ACCOUNT, CATALOG, PERSON)


def make_registry(*descriptors: TypeDescriptor) -> SchemaRegistry:
    return SchemaRegistry(list(descriptors or ALL_TYPES))


def make_movie(title="Shrek", director="Eddie Murphy", year=2001, rating=7.5):
    return ObjectInstance(
        "Movie",
        {"title": title, "director": director, "year": year, "rating": rating},
    )


def make_person(name, friend=None, contacts=None):
    return ObjectInstance(
        "Person",
        {"name": name, "friend": friend, "contacts": list(contacts or [])},
    )


def make_catalog(name, movies, featured=None):
    return ObjectInstance(
        "Catalog",
        {"name": name, "movies": list(movies), "featured": featured},
    )


def graph_equal(left: ObjectInstance, right: ObjectInstance, registry: SchemaRegistry) -> bool:
    """
    Structural equality of two graphs on included fields: both graphs must
    have the same shape, sharing included, and the same scalar values.
    """
    pairs: dict[int, int] = {}
    stack = [(left, right)]

    while stack:
        a, b = stack.pop()
        if a is None or b is None:
            if a is not b:
                return False
            continue

        if id(a) in pairs:
            if pairs[id(a)] != id(b):
                return False
            continue
        if id(b) in pairs.values():
            return False
        pairs[id(a)] = id(b)

        if a.type_id != b.type_id:
            return False

        descriptor = registry.lookup(a.type_id)
        for fd in descriptor.included_fields:
            va = a.fields.get(fd.name, fd.kind.zero())
            vb = b.fields.get(fd.name, fd.kind.zero())
            if fd.kind is FieldKind.ObjectRef:
                stack.append((va, vb))
            elif fd.kind is FieldKind.ObjectRefList:
                va, vb = list(va or []), list(vb or [])
                if len(va) != len(vb):
                    return False
                stack.extend(zip(va, vb))
            elif va != vb:
                return False

    return True
