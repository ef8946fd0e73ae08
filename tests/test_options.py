"""Tests for plugin parameter parsing and crate mapping files."""

import pytest
from builders import Method, Service, make_file_proto, make_pool

from rustgrpc.exceptions import ConfigurationError, UserProtoError
from rustgrpc.options import (
    GeneratorOptions,
    is_deprecated,
    load_crate_mapping,
    parse_crate_mapping,
    parse_generator_parameter,
    parse_options,
)


class TestParseGeneratorParameter:

    def test_empty(self):
        assert parse_generator_parameter("") == []

    def test_key_value_pairs_and_bare_keys(self):
        assert parse_generator_parameter("kernel=cpp,flag,a=b=c") == [
            ("kernel", "cpp"),
            ("flag", ""),
            ("a", "b=c"),
        ]

    def test_empty_parts_are_skipped(self):
        assert parse_generator_parameter(",kernel=upb,,") == [
            ("kernel", "upb")
        ]


class TestParseOptions:

    @pytest.mark.parametrize("kernel", ["cpp", "upb"])
    def test_kernel(self, kernel):
        options = parse_options(f"kernel={kernel}")
        assert options.kernel == kernel
        assert options.bazel_crate_mapping is None
        assert not options.strip_nonfunctional_codegen

    def test_missing_kernel(self):
        with pytest.raises(ConfigurationError, match="Mandatory option `kernel`"):
            parse_options("bazel_crate_mapping=foo.txt")

    def test_unknown_kernel(self):
        with pytest.raises(ConfigurationError, match="Unknown kernel `java`"):
            parse_options("kernel=java")

    def test_configuration_error_is_user_error(self):
        with pytest.raises(UserProtoError):
            parse_options("")

    def test_all_options(self):
        options = parse_options(
            "kernel=upb,bazel_crate_mapping=/tmp/mapping.txt,"
            "generated_entry_point_rs_file_name=lib.rs,"
            "experimental-strip-nonfunctional-codegen"
        )
        assert options == GeneratorOptions(
            kernel="upb",
            bazel_crate_mapping="/tmp/mapping.txt",
            generated_entry_point_rs_file_name="lib.rs",
            strip_nonfunctional_codegen=True,
        )

    def test_unknown_keys_are_ignored(self):
        assert parse_options("kernel=cpp,something=else").kernel == "cpp"

    def test_first_occurrence_wins(self):
        assert parse_options("kernel=cpp,kernel=java").kernel == "cpp"


class TestCrateMapping:

    def test_parse(self):
        contents = (
            "greeter_proto\n"
            "2\n"
            "greeter/v1/greeter.proto\n"
            "greeter/v1/types.proto\n"
            "\n"
            "wkt\n"
            "1\n"
            "google/protobuf/empty.proto\n"
        )
        assert parse_crate_mapping(contents) == {
            "greeter/v1/greeter.proto": "greeter_proto",
            "greeter/v1/types.proto": "greeter_proto",
            "google/protobuf/empty.proto": "wkt",
        }

    def test_empty(self):
        assert parse_crate_mapping("") == {}

    def test_crate_without_import_paths(self):
        assert parse_crate_mapping("lonely\n0\n") == {}

    def test_count_not_a_number(self):
        with pytest.raises(ConfigurationError, match="number of import paths"):
            parse_crate_mapping("crate\ntwo\na.proto\nb.proto\n")

    def test_missing_count(self):
        with pytest.raises(ConfigurationError, match="missing"):
            parse_crate_mapping("crate\n")

    def test_whitespace_and_crlf_are_stripped(self):
        contents = "dep_crate \r\n1\r\n  dep/types.proto\t\r\n \r\n"
        assert parse_crate_mapping(contents) == {"dep/types.proto": "dep_crate"}

    def test_last_crate_listing_a_path_wins(self):
        contents = "a\n1\nx.proto\nb\n1\nx.proto\n"
        assert parse_crate_mapping(contents) == {"x.proto": "b"}

    def test_truncated(self):
        with pytest.raises(ConfigurationError, match="lists 3 import paths"):
            parse_crate_mapping("crate\n3\na.proto\n")

    def test_load_without_mapping(self):
        assert load_crate_mapping(parse_options("kernel=cpp")) == {}

    def test_load_from_file(self, tmp_path):
        mapping_file = tmp_path / "mapping.txt"
        mapping_file.write_text("dep\n1\ndep/dep.proto\n")
        options = parse_options(f"kernel=cpp,bazel_crate_mapping={mapping_file}")
        assert load_crate_mapping(options) == {"dep/dep.proto": "dep"}

    def test_load_missing_file(self, tmp_path):
        options = parse_options(
            f"kernel=cpp,bazel_crate_mapping={tmp_path / 'nope.txt'}"
        )
        with pytest.raises(ConfigurationError, match="Could not read"):
            load_crate_mapping(options)


def test_is_deprecated():
    file_proto = make_file_proto(
        "test.proto",
        "test",
        services=[
            Service(
                name="Svc",
                methods=[Method(name="Old", deprecated=True), Method(name="New")],
            )
        ],
    )
    pool = make_pool(file_proto)
    service = pool.FindServiceByName("test.Svc")
    assert is_deprecated(service.methods_by_name["Old"])
    assert not is_deprecated(service.methods_by_name["New"])
