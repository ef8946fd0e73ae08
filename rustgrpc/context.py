from google.protobuf.descriptor import Descriptor, FileDescriptor
from google.protobuf.descriptor_pb2 import FileDescriptorProto
from rustgrpc.comments import SourceComments
from rustgrpc.exceptions import ConfigurationError
from rustgrpc.naming import (
    rust_internal_module_name,
    to_safe_identifier,
    to_snake_case,
)
from rustgrpc.options import GeneratorOptions, ImportPathToCrateName
from typing import Iterable


class GeneratorContext:
    """Everything needed to generate code for one proto file: the options,
    the crate mapping, which files belong to the crate being generated, and
    the file's source comments.

    Constructed once per generated file and discarded afterwards.
    """

    def __init__(
        self,
        *,
        options: GeneratorOptions,
        file_proto: FileDescriptorProto,
        files_in_current_crate: Iterable[str],
        import_path_to_crate_name: ImportPathToCrateName,
    ):
        self.options = options
        self.file_name = file_proto.name
        self.comments = SourceComments(file_proto)
        self._files_in_current_crate = frozenset(files_in_current_crate) | {
            file_proto.name
        }
        self._import_path_to_crate_name = import_path_to_crate_name
        # The Rust modules enclosing the generated code, outermost first.
        self.modules = [rust_internal_module_name(file_proto.name)]

    def is_in_current_crate(self, file: FileDescriptor) -> bool:
        return file.name in self._files_in_current_crate

    def crate_name(self, file: FileDescriptor) -> str:
        try:
            return self._import_path_to_crate_name[file.name]
        except KeyError:
            raise ConfigurationError(
                f"Path '{file.name}' not found in crate mapping; crate "
                f"mapping contains {len(self._import_path_to_crate_name)} "
                "entries. Pass a complete mapping with "
                "'bazel_crate_mapping=<path>'."
            )

    def rs_type_path(self, message: Descriptor) -> str:
        """Path under which the Rust type generated for `message` can be
        named from inside a generated client module.

        E.g. 'super::HelloRequest' for a message of the crate being generated,
        or '::other_crate::outer::Inner' for message `Outer.Inner` of another
        crate.
        """
        # Nested messages live in a module named after their containing
        # message, innermost first until we reverse them.
        modules: list[str] = []
        parent = message.containing_type
        while parent is not None:
            modules.append(to_safe_identifier(to_snake_case(parent.name)))
            parent = parent.containing_type
        modules.reverse()

        crate_relative = ''.join(f'{module}::' for module in modules)

        if self.is_in_current_crate(message.file):
            prefix = 'super::' * len(self.modules)
        else:
            crate_name = to_safe_identifier(self.crate_name(message.file))
            prefix = f'::{crate_name}::'

        return f'{prefix}{crate_relative}{to_safe_identifier(message.name)}'
