"""A small Modbus/TCP client covering the requests the field PLC needs."""

from __future__ import annotations

import socket
import struct
from types import TracebackType

DEFAULT_PORT = 502

_READ_DISCRETE_INPUTS = 0x02
_READ_HOLDING_REGISTERS = 0x03
_WRITE_MULTIPLE_COILS = 0x0F
_EXCEPTION_FLAG = 0x80

_MAX_READ_BITS = 2000
_MAX_READ_REGISTERS = 125
_MAX_WRITE_COILS = 1968

_MBAP_HEADER = struct.Struct(">HHHB")


class ModbusError(Exception):
    """Raised when a Modbus request fails or the device answers with an exception."""


class ModbusTcpClient:
    """Blocking Modbus/TCP client speaking to a single device."""

    def __init__(
        self, host: str, port: int = DEFAULT_PORT, timeout: float = 1.0, unit_id: int = 0xFF
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.unit_id = unit_id
        self._socket: socket.socket | None = None
        self._transaction_id = 0

    def connect(self) -> None:
        """Opens the TCP connection to the device."""
        self.close()
        try:
            self._socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as exc:
            raise ModbusError(f"cannot connect to {self.host}:{self.port}: {exc}") from exc

    def close(self) -> None:
        """Closes the connection if it is open."""
        if self._socket is not None:
            try:
                self._socket.close()
            finally:
                self._socket = None

    def __enter__(self) -> ModbusTcpClient:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def read_discrete_inputs(self, address: int, quantity: int) -> bytes:
        """Reads discrete inputs; returns the packed bits, least significant bit first."""
        _check_quantity(quantity, _MAX_READ_BITS)
        return self._read(_READ_DISCRETE_INPUTS, address, quantity, (quantity + 7) // 8)

    def read_holding_registers(self, address: int, quantity: int) -> bytes:
        """Reads holding registers; returns their big-endian bytes."""
        _check_quantity(quantity, _MAX_READ_REGISTERS)
        return self._read(_READ_HOLDING_REGISTERS, address, quantity, 2 * quantity)

    def write_multiple_coils(self, address: int, quantity: int, values: bytes) -> bytes:
        """Writes packed coil values; returns the echoed address and quantity."""
        _check_quantity(quantity, _MAX_WRITE_COILS)
        values = bytes(values)
        expected = (quantity + 7) // 8
        if len(values) != expected:
            raise ModbusError(f"coil data is {len(values)} bytes, expected {expected}")
        request = struct.pack(">BHHB", _WRITE_MULTIPLE_COILS, address, quantity, len(values)) + values
        response = self._transact(request)
        if len(response) != 5:
            raise ModbusError(f"write response is {len(response)} bytes, expected 5")
        echoed_address, echoed_quantity = struct.unpack(">HH", response[1:])
        if (echoed_address, echoed_quantity) != (address, quantity):
            raise ModbusError("write response does not match the request")
        return response[1:]

    def _read(self, function: int, address: int, quantity: int, expected_bytes: int) -> bytes:
        response = self._transact(struct.pack(">BHH", function, address, quantity))
        if len(response) < 2:
            raise ModbusError("response is too short")
        byte_count = response[1]
        data = response[2:]
        if byte_count != len(data) or byte_count != expected_bytes:
            raise ModbusError(f"response holds {len(data)} bytes, expected {expected_bytes}")
        return data

    def _transact(self, pdu: bytes) -> bytes:
        if self._socket is None:
            raise ModbusError("not connected")
        self._transaction_id = (self._transaction_id + 1) & 0xFFFF
        transaction_id = self._transaction_id
        header = _MBAP_HEADER.pack(transaction_id, 0, len(pdu) + 1, self.unit_id)
        try:
            self._socket.sendall(header + pdu)
            reply_id, protocol, length, _unit = _MBAP_HEADER.unpack(self._recv_exact(_MBAP_HEADER.size))
            if length < 2:
                raise ModbusError(f"invalid response length {length}")
            body = self._recv_exact(length - 1)
        except OSError as exc:
            raise ModbusError(f"connection error: {exc}") from exc
        if reply_id != transaction_id:
            raise ModbusError(f"response transaction {reply_id} does not match request {transaction_id}")
        if protocol != 0:
            raise ModbusError(f"unexpected protocol id {protocol}")
        function = pdu[0]
        if body[0] == function | _EXCEPTION_FLAG:
            code = body[1] if len(body) > 1 else 0
            raise ModbusError(f"device returned exception code {code} for function {function}")
        if body[0] != function:
            raise ModbusError(f"response function {body[0]} does not match request {function}")
        return body

    def _recv_exact(self, size: int) -> bytes:
        assert self._socket is not None
        chunks = bytearray()
        while len(chunks) < size:
            chunk = self._socket.recv(size - len(chunks))
            if not chunk:
                raise ModbusError("connection closed by device")
            chunks.extend(chunk)
        return bytes(chunks)


def _check_quantity(quantity: int, maximum: int) -> None:
    if not 1 <= quantity <= maximum:
        raise ModbusError(f"quantity {quantity} is outside 1..{maximum}")