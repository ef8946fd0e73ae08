# Extension of the schema files protoc hands to us.
PROTO_FILE_SUFFIX = '.proto'

# Suffix that replaces `PROTO_FILE_SUFFIX` in the name of the generated file,
# e.g. `helloworld.proto` -> `helloworld_grpc.pb.rs`.
OUTPUT_FILENAME_SUFFIX = '_grpc.pb.rs'

# Codec used by every generated method to encode requests and decode
# responses.
CODEC_NAME = 'grpc::codec::ProtoCodec'

# The generated client of service `Greeter` is the struct `GreeterClient` in
# the module `greeter_client`.
CLIENT_MODULE_SUFFIX = '_client'
CLIENT_TYPE_SUFFIX = 'Client'

# First line of every generated file, unless non-functional codegen is
# stripped.
GENERATED_FILE_MARKER = (
    '// @generated by protoc-gen-rust-grpc. DO NOT EDIT!'
)

# Name under which the plugin reports itself, e.g. as the tracing service
# name.
PLUGIN_NAME = 'protoc-gen-rust-grpc'

# Keys understood in the protoc plugin parameter, i.e. the value of
# `--rust-grpc_opt`.
PARAMETER_KERNEL = 'kernel'
PARAMETER_BAZEL_CRATE_MAPPING = 'bazel_crate_mapping'
PARAMETER_GENERATED_ENTRY_POINT_RS_FILE_NAME = (
    'generated_entry_point_rs_file_name'
)
PARAMETER_STRIP_NONFUNCTIONAL_CODEGEN = (
    'experimental-strip-nonfunctional-codegen'
)

# Tracing is only enabled when the standard OpenTelemetry endpoint variable
# is set; see `rustgrpc/tracing.py`.
ENVVAR_OTEL_EXPORTER_OTLP_TRACES_ENDPOINT = (
    'OTEL_EXPORTER_OTLP_TRACES_ENDPOINT'
)
