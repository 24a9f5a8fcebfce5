import socket
import struct
import threading

import pytest

from fieldcontrol.modbus import ModbusError, ModbusTcpClient

_HEADER = struct.Struct(">HHHB")


def _recv(conn, size):
    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            return None
        data.extend(chunk)
    return bytes(data)


class _Device:
    """Echoes written coils back as discrete inputs and serves fixed registers."""

    def __init__(self, registers=b""):
        self.coils = b""
        self.registers = registers

    def respond(self, pdu):
        function = pdu[0]
        if function == 0x0F:
            count = pdu[5]
            self.coils = pdu[6:6 + count]
            return pdu[:5]
        if function == 0x02:
            return bytes([function, len(self.coils)]) + self.coils
        if function == 0x03:
            quantity = struct.unpack(">H", pdu[3:5])[0]
            data = self.registers[:2 * quantity]
            return bytes([function, len(data)]) + data
        return bytes([function | 0x80, 1])


class _FakeServer:
    def __init__(self, respond):
        self._respond = respond
        self.requests = []
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            while True:
                header = _recv(conn, _HEADER.size)
                if header is None:
                    return
                tid, proto, length, unit = _HEADER.unpack(header)
                pdu = _recv(conn, length - 1)
                if pdu is None:
                    return
                self.requests.append((tid, proto, unit, pdu))
                reply = self._respond(pdu)
                conn.sendall(_HEADER.pack(tid, 0, len(reply) + 1, unit) + reply)

    def close(self):
        self._listener.close()


@pytest.fixture
def make_server():
    servers = []

    def factory(respond):
        server = _FakeServer(respond)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


def test_written_coils_read_back(make_server):
    device = _Device()
    server = make_server(device.respond)
    values = bytes([0b1011, 0b1])
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        echoed = client.write_multiple_coils(0, 10, values)
        assert echoed == struct.pack(">HH", 0, 10)
        assert client.read_discrete_inputs(0, 10) == values


def test_read_holding_registers_returns_register_bytes(make_server):
    registers = struct.pack(">HH", 333, 765)
    server = make_server(_Device(registers).respond)
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        data = client.read_holding_registers(0, 2)
    assert struct.unpack(">HH", data) == (333, 765)


def test_request_wire_format(make_server):
    server = make_server(_Device().respond)
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        client.write_multiple_coils(0, 15, bytes(2))
        client.read_discrete_inputs(0, 15)
    _, proto, unit, pdu = server.requests[1]
    assert proto == 0
    assert unit == 0xFF
    assert pdu == bytes([0x02, 0, 0, 0, 15])


def test_transaction_ids_increase(make_server):
    server = make_server(_Device(bytes(4)).respond)
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        client.read_holding_registers(0, 1)
        client.read_holding_registers(0, 1)
    first, second = (request[0] for request in server.requests)
    assert second == first + 1


def test_exception_response_raises(make_server):
    server = make_server(lambda pdu: bytes([pdu[0] | 0x80, 2]))
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        with pytest.raises(ModbusError, match="exception code 2"):
            client.read_discrete_inputs(0, 8)


def test_request_without_connection_raises():
    client = ModbusTcpClient("127.0.0.1", 1)
    with pytest.raises(ModbusError, match="not connected"):
        client.read_holding_registers(0, 1)


def test_connect_to_closed_port_raises():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    client = ModbusTcpClient("127.0.0.1", port, timeout=0.5)
    with pytest.raises(ModbusError):
        client.connect()


def test_invalid_quantity_raises(make_server):
    server = make_server(_Device().respond)
    with ModbusTcpClient("127.0.0.1", server.port) as client:
        with pytest.raises(ModbusError):
            client.read_discrete_inputs(0, 0)
        with pytest.raises(ModbusError):
            client.write_multiple_coils(0, 10, bytes(1))
    assert server.requests == []