import pytest

from serion.infra.file_store import FileBlobStore
from tests.helpers import make_catalog, make_movie


@pytest.mark.it
def test_write_read(tmp_path):
    store = FileBlobStore(tmp_path / "blobs", fsync=False)
    store.write("movie", b"\x00\x01\x02")

    assert store.read("movie") == b"\x00\x01\x02"
    assert (tmp_path / "blobs" / "movie.ser").read_bytes() == b"\x00\x01\x02"


@pytest.mark.it
def test_read_missing(tmp_path):
    store = FileBlobStore(tmp_path)
    assert store.read("nothing") is None


@pytest.mark.it
def test_overwrite_replaces_whole_blob(tmp_path):
    store = FileBlobStore(tmp_path)
    store.write("movie", b"a much longer first version")
    store.write("movie", b"short")

    assert store.read("movie") == b"short"


@pytest.mark.it
def test_names_and_delete(tmp_path):
    store = FileBlobStore(tmp_path)
    store.write("b", b"2")
    store.write("a", b"1")
    (tmp_path / "notes.txt").write_text("ignored")

    assert store.names() == ["a", "b"]

    store.delete("a")
    store.delete("a")
    assert store.names() == ["b"]


@pytest.mark.it
def test_no_temporary_files_left(tmp_path):
    with FileBlobStore(tmp_path) as store:
        store.write("movie", b"data")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["movie.ser"]


@pytest.mark.it
@pytest.mark.parametrize("name", ["", "../escape", "a/b", ".hidden", "x" * 129])
def test_invalid_names(tmp_path, name):
    store = FileBlobStore(tmp_path)

    with pytest.raises(ValueError):
        store.write(name, b"data")


@pytest.mark.it
def test_encode_store_decode(tmp_path, engine, registry):
    # the lab's Main: write a single object and a list to disk, read them back
    movie = make_movie(" Shrek ", "Eddie Murphy", 2013, 8.5)
    catalog = make_catalog("catalog", [
        make_movie("Shrek", "Eddie Murphy", 2013, 7.5),
        make_movie("Parasite", "Bong Joon-Ho", 2019, 10),
        make_movie("Us", "Jordan Peele", 2019, 8.5),
    ])

    with FileBlobStore(tmp_path / "resources") as store:
        store.write("movie", engine.encode(movie))
        store.write("catalog", engine.encode(catalog))

    with FileBlobStore(tmp_path / "resources") as store:
        loaded_movie = engine.decode(store.read("movie"))
        loaded_catalog = engine.decode(store.read("catalog"))

    assert loaded_movie.fields == movie.fields
    assert [m["rating"] for m in loaded_catalog["movies"]] == [7.5, 10.0, 8.5]


@pytest.mark.it
def test_path_of_names_blob_file(tmp_path):
    store = FileBlobStore(tmp_path, fsync=False)

    assert store.path_of("movie") == tmp_path / "movie.ser"
    with pytest.raises(ValueError):
        store.path_of("../escape")
