from dataclasses import dataclass, field
from google.protobuf.descriptor import MethodDescriptor, ServiceDescriptor
from rustgrpc.context import GeneratorContext
from rustgrpc.exceptions import InternalGeneratorError
from rustgrpc.naming import (
    to_safe_identifier,
    to_snake_case,
    to_upper_camel_case,
)
from rustgrpc.options import is_deprecated


@dataclass(frozen=True)
class MethodDefinition:
    name: str  # Rust identifier, e.g. "say_hello".
    schema_name: str  # As written in proto, e.g. "SayHello".
    full_name: str  # E.g. "helloworld.Greeter.SayHello".
    client_streaming: bool
    server_streaming: bool
    deprecated: bool
    comment: str
    request_type_name: str  # E.g. "super::HelloRequest".
    response_type_name: str

    # Private fields are used only within the plugin, they are not passed to the
    # template.
    _descriptor: MethodDescriptor = field(compare=False, repr=False)


@dataclass(frozen=True)
class ServiceDefinition:
    name: str  # Rust type identifier, e.g. "Greeter".
    full_name: str  # E.g. "helloworld.Greeter".
    # In declaration order; the generated code follows this order.
    methods: tuple[MethodDefinition, ...]
    comment: str

    # Private fields are used only within the plugin, they are not passed to the
    # template.
    _descriptor: ServiceDescriptor = field(compare=False, repr=False)


def method_definition(
    method: MethodDescriptor,
    context: GeneratorContext,
) -> MethodDefinition:
    if method.input_type is None or method.output_type is None:
        raise InternalGeneratorError(
            f"Method '{method.full_name}' is missing its request or response "
            "type"
        )

    return MethodDefinition(
        name=to_safe_identifier(to_snake_case(method.name)),
        schema_name=method.name,
        full_name=method.full_name,
        client_streaming=method.client_streaming,
        server_streaming=method.server_streaming,
        deprecated=is_deprecated(method),
        comment=context.comments.method_comment(
            method.containing_service.index,
            method.index,
        ),
        request_type_name=context.rs_type_path(method.input_type),
        response_type_name=context.rs_type_path(method.output_type),
        _descriptor=method,
    )


def service_definition(
    service: ServiceDescriptor,
    context: GeneratorContext,
) -> ServiceDefinition:
    return ServiceDefinition(
        name=to_safe_identifier(to_upper_camel_case(service.name)),
        full_name=service.full_name,
        methods=tuple(
            method_definition(method, context) for method in service.methods
        ),
        comment=context.comments.service_comment(service.index),
        _descriptor=service,
    )


def format_method_path(
    service: ServiceDefinition,
    method: MethodDefinition,
) -> str:
    """Route of the method on the wire, e.g. '/helloworld.Greeter/SayHello'.

    Uses the method's name as written in proto, never its Rust identifier;
    the server routes on the former.
    """
    return f'/{service.full_name}/{method.schema_name}'
