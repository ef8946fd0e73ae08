"""Pytest configuration and fixtures for the Rust gRPC generator tests."""

from __future__ import annotations

import pytest
from builders import Method, Service, make_file_proto
from google.protobuf.descriptor_pb2 import FileDescriptorProto


@pytest.fixture
def greeter_file() -> FileDescriptorProto:
    """The canonical 'helloworld' example: one service with one method of
    every streaming shape."""
    return make_file_proto(
        "helloworld/helloworld.proto",
        "helloworld",
        services=[
            Service(
                name="Greeter",
                methods=[
                    Method(name="SayHello"),
                    Method(name="LotsOfReplies", server_streaming=True),
                    Method(name="LotsOfGreetings", client_streaming=True),
                    Method(
                        name="BidiHello",
                        client_streaming=True,
                        server_streaming=True,
                    ),
                ],
            )
        ],
    )
