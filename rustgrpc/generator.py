import copy
import os
from collections.abc import Iterable
from dataclasses import dataclass, is_dataclass
from enum import Enum
from google.protobuf.descriptor_pb2 import FileDescriptorProto
from google.protobuf.descriptor_pool import DescriptorPool
from log.log import get_logger
from pyprotoc_plugin.helpers import (  # type: ignore[import]
    add_template_path,
    load_template,
)
from rustgrpc import tracing
from rustgrpc.comments import rustdoc_lines
from rustgrpc.context import GeneratorContext
from rustgrpc.descriptors import (
    MethodDefinition,
    ServiceDefinition,
    format_method_path,
    service_definition,
)
from rustgrpc.exceptions import InternalGeneratorError, UserProtoError
from rustgrpc.naming import to_snake_case
from rustgrpc.options import load_crate_mapping, parse_options
from rustgrpc.settings import (
    CLIENT_MODULE_SUFFIX,
    CLIENT_TYPE_SUFFIX,
    CODEC_NAME,
    GENERATED_FILE_MARKER,
    OUTPUT_FILENAME_SUFFIX,
    PROTO_FILE_SUFFIX,
)
from typing import Any, Optional, Sequence

logger = get_logger(__name__)

# NOTE: we need to add the template path so we can test the generator even
# when we're not '__main__'.
add_template_path(os.path.join(__file__, '../templates/'))

SERVICE_TEMPLATE_FILENAME = 'client.rs.j2'


class StreamingShape(Enum):
    UNARY = 'unary'
    SERVER_STREAMING = 'server_streaming'
    CLIENT_STREAMING = 'client_streaming'
    STREAMING = 'streaming'


def streaming_shape(method: MethodDefinition) -> StreamingShape:
    match (method.client_streaming, method.server_streaming):
        case (False, False):
            return StreamingShape.UNARY
        case (False, True):
            return StreamingShape.SERVER_STREAMING
        case (True, False):
            return StreamingShape.CLIENT_STREAMING
        case (True, True):
            return StreamingShape.STREAMING
    raise InternalGeneratorError(
        f"Method '{method.full_name}' has non-boolean streaming flags"
    )


def method_template_filename(shape: StreamingShape) -> str:
    """Template holding the code skeleton of a method of the given shape."""
    return f'client/{shape.value}.rs.j2'


def output_file_name(file_name: str) -> str:
    return file_name.removesuffix(PROTO_FILE_SUFFIX) + OUTPUT_FILENAME_SUFFIX


def asdict_omit_private_fields(name: str, obj: Any) -> Any:
    if obj is None:
        return None

    if isinstance(obj, dict):
        return {
            asdict_omit_private_fields(name=f"{name}.keys[?]", obj=k):
                asdict_omit_private_fields(name=f"{name}.values[?]", obj=v)
            for k, v in obj.items()
        }

    if isinstance(obj, Iterable) and not isinstance(obj, str):
        return [
            asdict_omit_private_fields(name=f"{name}[?]", obj=v) for v in obj
        ]

    if not is_dataclass(obj):
        # Following the semantics of `dataclasses.as_dict`:
        # we won't recurse into this field but will deep-copy it instead.
        #
        # We expect this object to be something a template might use; i.e. a
        # primitive. Yell loudly if it isn't!
        if not isinstance(obj, int) and not isinstance(obj, str):
            raise AssertionError(
                f"Unexpected template data field type: '{name}' is a "
                f"'{type(obj)}'"
            )
        return copy.deepcopy(obj)

    return {
        k: asdict_omit_private_fields(name=f"{name}.{k}", obj=v)
        for k, v in obj.__dict__.items()
        if not k.startswith("_")
    }


@dataclass
class RustMethod:
    ident: str
    request_type: str
    response_type: str
    path: str
    # Attached to every call as `GrpcMethod` metadata.
    service_name: str
    method_name: str
    deprecated: bool
    doc_lines: list[str]
    template_filename: str


@dataclass
class RustService:
    client_mod: str
    client_ident: str
    doc_lines: list[str]
    codec_name: str
    # The following is a Sequence, not list, to make it covariant:
    #   https://mypy.readthedocs.io/en/stable/common_issues.html#variance
    methods: Sequence[RustMethod]


@dataclass(frozen=True)
class GeneratedFile:
    name: str
    content: str


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    # Set if and only if `success` is false.
    error: Optional[str] = None
    # Not set on failure, nor when the proto file declares no services.
    file: Optional[GeneratedFile] = None


def _rust_method(
    service: ServiceDefinition,
    method: MethodDefinition,
) -> RustMethod:
    return RustMethod(
        ident=method.name,
        request_type=method.request_type_name,
        response_type=method.response_type_name,
        path=format_method_path(service, method),
        service_name=service.full_name,
        method_name=method.schema_name,
        deprecated=method.deprecated,
        doc_lines=rustdoc_lines(method.comment),
        template_filename=method_template_filename(streaming_shape(method)),
    )


def _rust_service(service: ServiceDefinition) -> RustService:
    return RustService(
        client_mod=to_snake_case(service.name) + CLIENT_MODULE_SUFFIX,
        client_ident=service.name + CLIENT_TYPE_SUFFIX,
        doc_lines=rustdoc_lines(service.comment),
        codec_name=CODEC_NAME,
        methods=[_rust_method(service, method) for method in service.methods],
    )


def render_service(service: ServiceDefinition) -> str:
    """Renders the client module of a single service."""
    template = load_template(
        SERVICE_TEMPLATE_FILENAME,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    return template.render(
        asdict_omit_private_fields(
            name='template_data',
            obj=_rust_service(service),
        )
    )


def _header(context: GeneratorContext) -> str:
    if context.options.strip_nonfunctional_codegen:
        return ''
    return f'{GENERATED_FILE_MARKER}\n// source: {context.file_name}\n\n'


def generate_file(
    file_proto: FileDescriptorProto,
    parameter: str,
    *,
    pool: DescriptorPool,
    files_in_current_crate: Optional[Iterable[str]] = None,
) -> Optional[GeneratedFile]:
    """Generates the Rust clients of all services in the given proto file.

    Returns `None` if the file declares no services. Raises `UserProtoError`
    or `InternalGeneratorError` if the file can't be generated.
    """
    # Return early to avoid creating an empty output file.
    if len(file_proto.service) == 0:
        logger.debug(f"No services in '{file_proto.name}'; nothing to do")
        return None

    options = parse_options(parameter)

    try:
        file = pool.FindFileByName(file_proto.name)
    except KeyError as error:
        raise InternalGeneratorError(
            f"Proto file '{file_proto.name}' is not in the descriptor pool"
        ) from error

    context = GeneratorContext(
        options=options,
        file_proto=file_proto,
        files_in_current_crate=files_in_current_crate or [],
        import_path_to_crate_name=load_crate_mapping(options),
    )

    services: list[str] = []
    # Walk the services in declaration order; `services_by_name` does not
    # promise any order.
    for service_proto in file_proto.service:
        try:
            service_descriptor = file.services_by_name[service_proto.name]
        except KeyError as error:
            raise InternalGeneratorError(
                f"Service '{service_proto.name}' of '{file_proto.name}' is "
                "not in the descriptor pool"
            ) from error

        with tracing.span(f"render_service({service_descriptor.full_name})"):
            service = service_definition(service_descriptor, context)
            logger.debug(
                f"Generating client for service '{service.full_name}' "
                f"with {len(service.methods)} method(s)"
            )
            services.append(render_service(service))

    return GeneratedFile(
        name=output_file_name(file_proto.name),
        content=_header(context) + '\n'.join(services),
    )


def generate(
    file_proto: FileDescriptorProto,
    parameter: str,
    *,
    pool: DescriptorPool,
    files_in_current_crate: Optional[Iterable[str]] = None,
) -> GenerationResult:
    """Generates the Rust clients for a single proto file.

    Never raises for a bad file or parameter; the error is reported in the
    returned result instead, and no output file is produced.
    """
    with tracing.span(f"generate({file_proto.name})"):
        try:
            generated = generate_file(
                file_proto,
                parameter,
                pool=pool,
                files_in_current_crate=files_in_current_crate,
            )
        except (UserProtoError, InternalGeneratorError) as error:
            logger.debug(f"Failed to generate '{file_proto.name}': {error}")
            return GenerationResult(success=False, error=str(error))

    return GenerationResult(success=True, file=generated)
