from google.protobuf.descriptor_pb2 import (
    FileDescriptorProto,
    ServiceDescriptorProto,
    SourceCodeInfo,
)
from typing import Sequence

# The rustdoc comment marker.
RUSTDOC_MARKER = '///'

# Characters with a meaning in Markdown or rustdoc. Each gets a backslash in
# front of it so that schema comments render literally.
_RUSTDOC_ESCAPES = str.maketrans(
    {c: f'\\{c}'
     for c in ['`', '*', '_', '[', ']', '#', '<', '>']}
)

# Field numbers of `FileDescriptorProto.service` and
# `ServiceDescriptorProto.method`, used to build `SourceCodeInfo` paths.
SERVICE_FIELD_NUMBER = FileDescriptorProto.SERVICE_FIELD_NUMBER
METHOD_FIELD_NUMBER = ServiceDescriptorProto.METHOD_FIELD_NUMBER


def sanitize_for_rustdoc(line: str) -> str:
    # The backslash must be escaped before anything else; otherwise the
    # backslashes added for the markup characters would be doubled too.
    sanitized = line.replace('\\', '\\\\')
    return sanitized.translate(_RUSTDOC_ESCAPES)


def rustdoc_lines(comment: str) -> list[str]:
    """Converts a raw schema comment into rustdoc lines, one per line of the
    comment. Blank lines are kept as a bare marker so that paragraphs survive.

    An empty comment produces no lines at all.
    """
    if comment == '':
        return []

    lines: list[str] = []
    for line in comment.split('\n'):
        if line == '':
            lines.append(RUSTDOC_MARKER)
        else:
            lines.append(f'{RUSTDOC_MARKER} {sanitize_for_rustdoc(line)}')
    return lines


class SourceComments:
    """Index over the `SourceCodeInfo` of a single proto file.

    Only the file's own `FileDescriptorProto` carries source information; the
    descriptors in a `DescriptorPool` don't.
    """

    def __init__(self, file_proto: FileDescriptorProto):
        self._locations: dict[tuple[int, ...], SourceCodeInfo.Location] = {}
        for location in file_proto.source_code_info.location:
            # Keep the first location for a path, like protoc does.
            self._locations.setdefault(tuple(location.path), location)

    def comment(self, path: Sequence[int]) -> str:
        """Leading comment of the element at `path`, or its trailing comment
        if there is no leading one, or the empty string."""
        location = self._locations.get(tuple(path))
        if location is None:
            return ''
        if location.leading_comments != '':
            return location.leading_comments
        return location.trailing_comments

    def service_comment(self, service_index: int) -> str:
        return self.comment([SERVICE_FIELD_NUMBER, service_index])

    def method_comment(self, service_index: int, method_index: int) -> str:
        return self.comment(
            [
                SERVICE_FIELD_NUMBER,
                service_index,
                METHOD_FIELD_NUMBER,
                method_index,
            ]
        )
