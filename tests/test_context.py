"""Tests for resolving Rust type paths of request and response messages."""

import pytest
from builders import make_file_proto, make_pool

from rustgrpc.context import GeneratorContext
from rustgrpc.exceptions import ConfigurationError
from rustgrpc.options import parse_options


def _context(file_proto, *, mapping=None, files_in_current_crate=()):
    return GeneratorContext(
        options=parse_options("kernel=cpp"),
        file_proto=file_proto,
        files_in_current_crate=files_in_current_crate,
        import_path_to_crate_name=mapping or {},
    )


def test_message_in_same_file():
    file_proto = make_file_proto("helloworld.proto", "helloworld")
    pool = make_pool(file_proto)
    context = _context(file_proto)
    message = pool.FindMessageTypeByName("helloworld.HelloRequest")
    assert context.rs_type_path(message) == "super::HelloRequest"


def test_nested_message():
    file_proto = make_file_proto(
        "outer.proto",
        "pkg",
        nested_messages={"OuterMessage": ["Inner"]},
    )
    pool = make_pool(file_proto)
    context = _context(file_proto)
    message = pool.FindMessageTypeByName("pkg.OuterMessage.Inner")
    assert context.rs_type_path(message) == "super::outer_message::Inner"


def test_nested_message_with_keyword_module():
    file_proto = make_file_proto(
        "kw.proto",
        "pkg",
        nested_messages={"Type": ["Fn"]},
    )
    pool = make_pool(file_proto)
    context = _context(file_proto)
    message = pool.FindMessageTypeByName("pkg.Type.Fn")
    assert context.rs_type_path(message) == "super::r#type::Fn"


def test_message_from_other_file_in_current_crate():
    dep = make_file_proto("dep/types.proto", "dep", messages=("Payload",))
    file_proto = make_file_proto(
        "main.proto", "main", dependencies=("dep/types.proto",)
    )
    pool = make_pool(dep, file_proto)
    context = _context(
        file_proto, files_in_current_crate=["main.proto", "dep/types.proto"]
    )
    message = pool.FindMessageTypeByName("dep.Payload")
    assert context.rs_type_path(message) == "super::Payload"


def test_message_from_other_crate():
    dep = make_file_proto("dep/types.proto", "dep", messages=("Payload",))
    file_proto = make_file_proto(
        "main.proto", "main", dependencies=("dep/types.proto",)
    )
    pool = make_pool(dep, file_proto)
    context = _context(file_proto, mapping={"dep/types.proto": "dep_crate"})
    message = pool.FindMessageTypeByName("dep.Payload")
    assert context.rs_type_path(message) == "::dep_crate::Payload"


def test_message_from_other_crate_without_mapping():
    dep = make_file_proto("dep/types.proto", "dep", messages=("Payload",))
    file_proto = make_file_proto(
        "main.proto", "main", dependencies=("dep/types.proto",)
    )
    pool = make_pool(dep, file_proto)
    context = _context(file_proto)
    message = pool.FindMessageTypeByName("dep.Payload")
    with pytest.raises(ConfigurationError, match="dep/types.proto"):
        context.rs_type_path(message)


def test_modules():
    file_proto = make_file_proto("foo/bar_baz.proto", "foo")
    assert _context(file_proto).modules == ["foo_sbar__baz"]


def test_crate_name_that_is_a_keyword():
    dep = make_file_proto("dep/types.proto", "dep", messages=("Payload",))
    file_proto = make_file_proto(
        "main.proto", "main", dependencies=("dep/types.proto",)
    )
    pool = make_pool(dep, file_proto)
    context = _context(file_proto, mapping={"dep/types.proto": "type"})
    message = pool.FindMessageTypeByName("dep.Payload")
    assert context.rs_type_path(message) == "::r#type::Payload"
