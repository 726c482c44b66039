import pytest
import serial

from actuator import Maestro


class FakeSerialPort:
    """In-memory stand-in for serial.Serial."""

    def __init__(self, replies: bytes = b"", fail_write: bool = False, fail_read: bool = False):
        self.written = bytearray()
        self.replies = bytearray(replies)
        self.fail_write = fail_write
        self.fail_read = fail_read
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.fail_write:
            raise serial.SerialException("write failed")
        self.written.extend(data)
        return len(data)

    def read(self, size: int = 1) -> bytes:
        if self.fail_read:
            raise serial.SerialException("read failed")
        chunk = bytes(self.replies[:size])
        del self.replies[:size]
        return chunk

    def queue(self, data: bytes) -> None:
        self.replies.extend(data)

    def close(self) -> None:
        self.closed = True

    def commands(self, size: int = 4):
        """Split everything written into fixed-size commands."""
        data = bytes(self.written)
        return [data[i:i + size] for i in range(0, len(data), size)]


@pytest.fixture
def fake_port() -> FakeSerialPort:
    return FakeSerialPort()


@pytest.fixture
def maestro(fake_port: FakeSerialPort) -> Maestro:
    return Maestro(fake_port)
