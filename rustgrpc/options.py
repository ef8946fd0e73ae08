import pydantic  # type: ignore[import]
from google.protobuf.descriptor import MethodDescriptor
from google.protobuf.descriptor_pb2 import MethodOptions
from log.log import get_logger
from rustgrpc.exceptions import ConfigurationError
from rustgrpc.settings import (
    PARAMETER_BAZEL_CRATE_MAPPING,
    PARAMETER_GENERATED_ENTRY_POINT_RS_FILE_NAME,
    PARAMETER_KERNEL,
    PARAMETER_STRIP_NONFUNCTIONAL_CODEGEN,
)
from typing import Literal, Optional

logger = get_logger(__name__)

Kernel = Literal['cpp', 'upb']

# From import path of a proto file, e.g. 'foo/bar.proto', to the name of the
# Rust crate its messages are generated into.
ImportPathToCrateName = dict[str, str]


class GeneratorOptions(pydantic.BaseModel):
    """Options passed to the plugin through its protoc parameter."""

    model_config = pydantic.ConfigDict(frozen=True)

    kernel: Kernel
    bazel_crate_mapping: Optional[str] = None
    # Accepted so protoc invocations shared with the message generator keep
    # working; client generation does not use it.
    generated_entry_point_rs_file_name: Optional[str] = None
    strip_nonfunctional_codegen: bool = False


def parse_generator_parameter(parameter: str) -> list[tuple[str, str]]:
    """Splits a protoc plugin parameter, e.g. 'kernel=cpp,foo', into its
    key/value pairs, e.g. [('kernel', 'cpp'), ('foo', '')].
    """
    pairs: list[tuple[str, str]] = []
    for part in parameter.split(','):
        if part == '':
            continue
        key, _, value = part.partition('=')
        pairs.append((key, value))
    return pairs


def parse_options(parameter: str) -> GeneratorOptions:
    pairs = parse_generator_parameter(parameter)
    # The first occurrence of a key wins.
    values: dict[str, str] = {}
    for key, value in pairs:
        values.setdefault(key, value)

    if PARAMETER_KERNEL not in values:
        raise ConfigurationError(
            "Mandatory option `kernel` missing, please specify `cpp` or `upb`."
        )

    kernel = values[PARAMETER_KERNEL]
    if kernel not in ('cpp', 'upb'):
        raise ConfigurationError(
            f"Unknown kernel `{kernel}`, please specify `cpp` or `upb`."
        )

    known = {
        PARAMETER_KERNEL,
        PARAMETER_BAZEL_CRATE_MAPPING,
        PARAMETER_GENERATED_ENTRY_POINT_RS_FILE_NAME,
        PARAMETER_STRIP_NONFUNCTIONAL_CODEGEN,
    }
    for key in values.keys() - known:
        logger.debug(f"Ignoring unknown plugin parameter '{key}'")

    try:
        return GeneratorOptions(
            kernel=kernel,
            bazel_crate_mapping=values.get(PARAMETER_BAZEL_CRATE_MAPPING),
            generated_entry_point_rs_file_name=values.get(
                PARAMETER_GENERATED_ENTRY_POINT_RS_FILE_NAME
            ),
            strip_nonfunctional_codegen=(
                PARAMETER_STRIP_NONFUNCTIONAL_CODEGEN in values
            ),
        )
    except pydantic.ValidationError as error:
        raise ConfigurationError(
            f"Invalid plugin parameter '{parameter}': {error}"
        ) from error


def parse_crate_mapping(contents: str) -> ImportPathToCrateName:
    """Parses the contents of a crate mapping file.

    The file consists of groups of non-empty lines: the name of a crate, the
    number of import paths that belong to it, and then that many import paths.
    For example:

      greeter_proto
      2
      greeter/v1/greeter.proto
      greeter/v1/types.proto
    """
    # Surrounding whitespace, including the '\r' of CRLF line endings, is
    # not part of a name or count.
    lines = [line.strip() for line in contents.split('\n')]
    lines = [line for line in lines if line != '']
    mapping: ImportPathToCrateName = {}
    index = 0
    while index < len(lines):
        crate_name = lines[index]
        index += 1
        if index >= len(lines):
            raise ConfigurationError(
                f"Crate mapping for crate '{crate_name}' is missing its "
                "number of import paths"
            )
        try:
            count = int(lines[index])
        except ValueError as error:
            raise ConfigurationError(
                "Couldn't parse number of import paths in mapping file"
            ) from error
        index += 1
        if count < 0 or index + count > len(lines):
            raise ConfigurationError(
                f"Crate mapping for crate '{crate_name}' lists {count} "
                f"import paths but only {max(len(lines) - index, 0)} follow"
            )
        for import_path in lines[index:index + count]:
            # A later crate listing the same import path takes it over.
            mapping[import_path] = crate_name
        index += count
    return mapping


def load_crate_mapping(options: GeneratorOptions) -> ImportPathToCrateName:
    """Reads the crate mapping file named by the options, if any."""
    if options.bazel_crate_mapping is None or options.bazel_crate_mapping == '':
        return {}
    try:
        with open(options.bazel_crate_mapping, 'r', encoding='utf-8') as file:
            contents = file.read()
    except OSError as error:
        raise ConfigurationError(
            "Could not read crate mapping file "
            f"'{options.bazel_crate_mapping}': {error}"
        ) from error
    return parse_crate_mapping(contents)


def is_deprecated(method: MethodDescriptor) -> bool:
    """
    Checks whether the method carries the `deprecated = true` option.
    """
    options: MethodOptions = method.GetOptions()
    return options.deprecated
