import pytest

from serion.core.errors import MalformedFieldError, UnregisteredTypeError
from serion.core.graph.walker import GraphWalker
from serion.core.models.instance import ObjectInstance
from tests.helpers import make_catalog, make_movie, make_person


@pytest.fixture
def walker(registry) -> GraphWalker:
    return GraphWalker(registry)


@pytest.mark.ut
def test_single_object(walker):
    movie = make_movie()
    assert list(walker.walk(movie)) == [(0, movie)]


@pytest.mark.ut
def test_depth_first_preorder(walker):
    carol = make_person("carol")
    bob = make_person("bob", friend=carol)
    dave = make_person("dave")
    alice = make_person("alice", friend=bob, contacts=[dave, carol])

    visited = [(gid, p["name"]) for gid, p in walker.walk(alice)]

    assert visited == [(0, "alice"), (1, "bob"), (2, "carol"), (3, "dave")]


@pytest.mark.ut
def test_shared_instance_visited_once(walker):
    shrek = make_movie()
    catalog = make_catalog("favourites", [shrek, shrek], featured=shrek)

    visited = list(walker.walk(catalog))

    assert [gid for gid, _ in visited] == [0, 1]
    assert visited[1][1] is shrek


@pytest.mark.ut
def test_equal_values_are_distinct_objects(walker):
    a = make_movie()
    b = make_movie()
    catalog = make_catalog("twins", [a, b])

    visited = list(walker.walk(catalog))

    assert len(visited) == 3
    assert visited[1][1] is a
    assert visited[2][1] is b


@pytest.mark.ut
def test_self_cycle_terminates(walker):
    narcissus = make_person("narcissus")
    narcissus["friend"] = narcissus

    assert list(walker.walk(narcissus)) == [(0, narcissus)]


@pytest.mark.ut
def test_mutual_cycle_terminates(walker):
    alice = make_person("alice")
    bob = make_person("bob", friend=alice)
    alice["friend"] = bob

    visited = [p["name"] for _, p in walker.walk(alice)]

    assert visited == ["alice", "bob"]


@pytest.mark.ut
def test_long_chain_does_not_recurse(walker):
    head = make_person("p0")
    current = head
    for i in range(1, 5000):
        nxt = make_person(f"p{i}")
        current["friend"] = nxt
        current = nxt

    ids = [gid for gid, _ in walker.walk(head)]

    assert ids == list(range(5000))


@pytest.mark.ut
def test_excluded_reference_not_followed(walker):
    hidden = make_person("hidden")
    alice = make_person("alice")
    alice["secret_friend"] = hidden

    assert list(walker.walk(alice)) == [(0, alice)]


@pytest.mark.ut
def test_none_entries_skipped(walker):
    movie = make_movie()
    catalog = make_catalog("gaps", [None, movie, None])

    assert [gid for gid, _ in walker.walk(catalog)] == [0, 1]


@pytest.mark.ut
def test_walk_is_lazy(walker):
    ghost = ObjectInstance("Ghost")
    alice = make_person("alice", friend=ghost)

    it = walker.walk(alice)
    assert next(it) == (0, alice)

    with pytest.raises(UnregisteredTypeError):
        next(it)


@pytest.mark.ut
def test_unregistered_root(walker):
    with pytest.raises(UnregisteredTypeError) as info:
        list(walker.walk(ObjectInstance("Ghost")))

    assert info.value.type_id == "Ghost"


@pytest.mark.ut
def test_reference_must_be_an_object(walker):
    alice = make_person("alice")
    alice["friend"] = "bob"

    with pytest.raises(MalformedFieldError, match="Person.friend"):
        list(walker.walk(alice))


@pytest.mark.ut
def test_reference_list_must_be_a_list(walker):
    catalog = make_catalog("bad", [])
    catalog["movies"] = make_movie()

    with pytest.raises(MalformedFieldError, match="Catalog.movies"):
        list(walker.walk(catalog))


@pytest.mark.ut
def test_root_must_be_an_object(walker):
    with pytest.raises(MalformedFieldError):
        list(walker.walk({"type_id": "Movie"}))
