#!/usr/bin/env python3
import sys
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor_pb2 import FileDescriptorProto
from google.protobuf.descriptor_pool import DescriptorPool
from log.log import get_logger
from pyprotoc_plugin.plugins import ProtocPlugin  # type: ignore[import]
from rustgrpc import tracing
from rustgrpc.exceptions import UserProtoError
from rustgrpc.generator import generate
from rustgrpc.settings import PLUGIN_NAME
from typing import Optional

logger = get_logger(__name__)

SUPPORTED_FEATURES = (
    plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL |
    plugin_pb2.CodeGeneratorResponse.FEATURE_SUPPORTS_EDITIONS
)
MINIMUM_EDITION = descriptor_pb2.EDITION_PROTO2
MAXIMUM_EDITION = descriptor_pb2.EDITION_2023


class RustGrpcProtocPlugin(ProtocPlugin):

    def __init__(
        self,
        pool: Optional[DescriptorPool] = None,
        request: Optional[plugin_pb2.CodeGeneratorRequest] = None,
    ):
        """Initialize the plugin with a descriptor pool and the request it
        answers. Used only when the plugin is driven directly instead of
        through `execute()`, e.g. in tests."""
        if pool is not None:
            self.pool = pool
        if request is not None:
            self.request = request
            self.response = plugin_pb2.CodeGeneratorResponse()

    def _declare_supported_features(self) -> None:
        self.response.supported_features = SUPPORTED_FEATURES
        self.response.minimum_edition = MINIMUM_EDITION
        self.response.maximum_edition = MAXIMUM_EDITION

    def process_file(
        self,
        file_proto: FileDescriptorProto,
    ) -> Optional[plugin_pb2.CodeGeneratorResponse.File]:
        self._declare_supported_features()

        # Dependencies are part of the request too, but we only generate the
        # files protoc asked for.
        if file_proto.name not in self.request.file_to_generate:
            return None

        result = generate(
            file_proto,
            self.request.parameter,
            pool=self.pool,
            files_in_current_crate=self.request.file_to_generate,
        )

        if not result.success:
            raise UserProtoError(
                f"Error processing '{file_proto.name}': {result.error}"
            )

        if result.file is None:
            # No services, so no file; protoc would otherwise create an empty
            # one.
            return None

        output_file = self.response.file.add()
        output_file.name = result.file.name
        output_file.content = result.file.content
        logger.debug(f"Generated '{output_file.name}'")
        return output_file


# This is a separate function (rather than just being in `__main__`) so that we
# can refer to it as a `script` in our `pyproject.toml`.
@tracing.main_span(PLUGIN_NAME)
def main():
    try:
        RustGrpcProtocPlugin.execute()
    except UserProtoError as error:
        print(f"{error}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
