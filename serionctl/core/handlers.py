import argparse
from pathlib import Path
from typing import Any

import yaml

from serion.core.models.record import EncodedStream
from serion.core.schema.registry import SchemaRegistry
from serionctl.core.document import DocumentBuilder
from serionctl.core.session import Session


def cmd_schema(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    _ = namespace
    return session.engine.registry.to_dict()


def cmd_list(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    _ = namespace
    return {"blobs": session.store.names()}


def cmd_encode(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    document = yaml.safe_load(Path(namespace.document).read_text())
    root = DocumentBuilder(session.engine.registry).build(document)
    data = session.engine.encode(root)
    session.store.write(namespace.name, data)
    return {
        "name": namespace.name,
        "root": root.type_id,
        "size": len(data),
    }


def cmd_decode(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    data = session.store.read(namespace.name)
    if data is None:
        raise ValueError(f"No blob named '{namespace.name}'")

    engine = session.engine
    stream = engine.records(data)
    # a stream whose references cannot be resolved is rejected here
    engine.materialize(stream)
    return {"name": namespace.name, **render_stream(stream, engine.registry)}


def cmd_inspect(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    data = Path(namespace.file).read_bytes()
    engine = session.engine
    stream = engine.records(data)
    return {"file": namespace.file, "size": len(data), **render_stream(stream, engine.registry)}


def cmd_delete(session: Session, namespace: argparse.Namespace) -> dict[str, Any]:
    session.store.delete(namespace.name)
    return {"deleted": namespace.name}


def render_stream(stream: EncodedStream, registry: SchemaRegistry) -> dict[str, Any]:
    return {
        "records": [
            record.to_dict(registry.lookup(record.type_id))
            for record in stream
        ]
    }
