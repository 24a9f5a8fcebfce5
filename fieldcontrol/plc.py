"""Reading inputs from and writing outputs to the field PLC."""

from __future__ import annotations

import enum
import logging
import struct
import threading
import time
from typing import Any, Callable, Protocol, Sequence

from fieldcontrol.modbus import DEFAULT_PORT, ModbusError, ModbusTcpClient

log = logging.getLogger(__name__)

MODBUS_PORT = DEFAULT_PORT
LOOP_PERIOD_SEC = 0.1
RETRY_INTERVAL_SEC = 3.0
CYCLE_COUNTER_MAX = 100
_MATCH_RESET_PULSE_CYCLES = 5


def _camel_case(name: str) -> str:
    first, *rest = name.lower().split("_")
    return first + "".join(part.capitalize() for part in rest)


class _NamedIndex(enum.IntEnum):
    @property
    def label(self) -> str:
        """Camel-case name used in I/O listings."""
        return _camel_case(self.name)


class Input(_NamedIndex):
    FIELD_ESTOP = 0
    RED_ESTOP1 = 1
    RED_ESTOP2 = 2
    RED_ESTOP3 = 3
    BLUE_ESTOP1 = 4
    BLUE_ESTOP2 = 5
    BLUE_ESTOP3 = 6
    RED_CONNECTED1 = 7
    RED_CONNECTED2 = 8
    RED_CONNECTED3 = 9
    BLUE_CONNECTED1 = 10
    BLUE_CONNECTED2 = 11
    BLUE_CONNECTED3 = 12
    RED_CHARGE_STATION_LEVEL = 13
    BLUE_CHARGE_STATION_LEVEL = 14


class Register(_NamedIndex):
    FIELD_IO_CONNECTION = 0


class Coil(_NamedIndex):
    HEARTBEAT = 0
    MATCH_RESET = 1
    STACK_LIGHT_GREEN = 2
    STACK_LIGHT_ORANGE = 3
    STACK_LIGHT_RED = 4
    STACK_LIGHT_BLUE = 5
    STACK_LIGHT_BUZZER = 6
    FIELD_RESET_LIGHT = 7
    RED_CHARGE_STATION_LIGHT = 8
    BLUE_CHARGE_STATION_LIGHT = 9


class ArmorBlock(_NamedIndex):
    """Bit positions of the I/O module connection statuses in FIELD_IO_CONNECTION."""

    RED_DS = 0
    BLUE_DS = 1
    HUB = 2


class _Client(Protocol):
    def connect(self) -> None: ...

    def close(self) -> None: ...

    def read_discrete_inputs(self, address: int, quantity: int) -> bytes: ...

    def read_holding_registers(self, address: int, quantity: int) -> bytes: ...

    def write_multiple_coils(self, address: int, quantity: int, values: bytes) -> bytes: ...


def _default_client(address: str) -> _Client:
    return ModbusTcpClient(address, MODBUS_PORT, timeout=1.0, unit_id=0xFF)


def byte_to_bool(data: bytes, size: int) -> list[bool]:
    """Unpacks the first size bits of data, least significant bit first."""
    return [bool(data[i // 8] >> (i % 8) & 1) for i in range(size)]


def byte_to_uint(data: bytes, size: int) -> list[int]:
    """Decodes size big-endian 16-bit words from data."""
    return list(struct.unpack_from(f">{size}H", data))


def bool_to_byte(bools: Sequence[bool]) -> bytes:
    """Packs booleans into bytes, least significant bit first."""
    packed = bytearray((len(bools) + 7) // 8)
    for i, bit in enumerate(bools):
        if bit:
            packed[i // 8] |= 1 << (i % 8)
    return bytes(packed)


class ModbusPlc:
    """Keeps the field PLC's inputs, registers and coils in step with the device."""

    def __init__(
        self,
        client_factory: Callable[[str], _Client] | None = None,
        on_io_change: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        self.address = ""
        self.inputs = [False] * len(Input)
        self.registers = [0] * len(Register)
        self.coils = [False] * len(Coil)
        self._client_factory = client_factory or _default_client
        self._on_io_change = on_io_change
        self._client: _Client | None = None
        self._healthy = False
        self._old_state = self._snapshot()
        self._cycle_counter = 0
        self._match_reset_cycles = 0

    def set_address(self, address: str) -> None:
        """Changes the PLC address and drops any open connection."""
        self.address = address
        self._reset_connection()

    def is_enabled(self) -> bool:
        """True if a PLC address is configured."""
        return self.address != ""

    def is_healthy(self) -> bool:
        """True if the PLC is connected and answering requests."""
        return self._healthy

    def run(self, stop_event: threading.Event | None = None) -> None:
        """Cycles until the stop event is set, or forever without one."""
        stop_event = stop_event or threading.Event()
        while not stop_event.is_set():
            start = time.monotonic()
            if not self.cycle():
                stop_event.wait(RETRY_INTERVAL_SEC)
                continue
            stop_event.wait(max(0.0, LOOP_PERIOD_SEC - (time.monotonic() - start)))
        self._reset_connection()

    def cycle(self) -> bool:
        """Runs one exchange with the PLC; returns False if connecting failed."""
        if self._client is None:
            if not self.is_enabled():
                # Without a PLC the loop keeps running to simulate inputs and outputs.
                self._healthy = False
            else:
                try:
                    self._connect()
                except (ModbusError, OSError) as exc:
                    log.warning("PLC error: %s", exc)
                    self._healthy = False
                    return False

        if self._client is not None:
            healthy = self._write_coils() and self._read_inputs() and self._read_registers()
            if not healthy:
                self._reset_connection()
            self._healthy = healthy

        self._cycle_counter += 1
        if self._cycle_counter == CYCLE_COUNTER_MAX:
            self._cycle_counter = 0

        snapshot = self._snapshot()
        if snapshot != self._old_state:
            self._old_state = snapshot
            if self._on_io_change is not None:
                self._on_io_change(self.io_change_message())
        return True

    def io_change_message(self) -> dict[str, Any]:
        """Current I/O values as sent to listeners."""
        return {"Inputs": list(self.inputs), "Registers": list(self.registers), "Coils": list(self.coils)}

    def get_armor_block_statuses(self) -> dict[str, bool]:
        """Whether each I/O module is connected, keyed by its title-case name."""
        connections = self.registers[Register.FIELD_IO_CONNECTION]
        return {
            block.label[0].upper() + block.label[1:]: bool(connections & (1 << block))
            for block in ArmorBlock
        }

    def get_field_estop(self) -> bool:
        """True if the field emergency stop is active."""
        return not self.inputs[Input.FIELD_ESTOP]

    def get_team_estops(self) -> tuple[tuple[bool, bool, bool], tuple[bool, bool, bool]]:
        """Red and blue station emergency stops; True where active."""
        red = (Input.RED_ESTOP1, Input.RED_ESTOP2, Input.RED_ESTOP3)
        blue = (Input.BLUE_ESTOP1, Input.BLUE_ESTOP2, Input.BLUE_ESTOP3)
        return self._triple(red, invert=True), self._triple(blue, invert=True)

    def get_ethernet_connected(self) -> tuple[tuple[bool, bool, bool], tuple[bool, bool, bool]]:
        """Whether anything is plugged into each station's Ethernet port."""
        red = (Input.RED_CONNECTED1, Input.RED_CONNECTED2, Input.RED_CONNECTED3)
        blue = (Input.BLUE_CONNECTED1, Input.BLUE_CONNECTED2, Input.BLUE_CONNECTED3)
        return self._triple(red, invert=False), self._triple(blue, invert=False)

    def reset_match(self) -> None:
        """Pulses the match reset coil to clear the PLC's match state."""
        self.coils[Coil.MATCH_RESET] = True
        self._match_reset_cycles = 0

    def set_stack_lights(self, red: bool, blue: bool, orange: bool, green: bool) -> None:
        self.coils[Coil.STACK_LIGHT_RED] = red
        self.coils[Coil.STACK_LIGHT_BLUE] = blue
        self.coils[Coil.STACK_LIGHT_ORANGE] = orange
        self.coils[Coil.STACK_LIGHT_GREEN] = green

    def set_stack_buzzer(self, state: bool) -> None:
        """Sounds the match-ready chime while state is True."""
        self.coils[Coil.STACK_LIGHT_BUZZER] = state

    def set_field_reset_light(self, state: bool) -> None:
        self.coils[Coil.FIELD_RESET_LIGHT] = state

    def get_cycle_state(self, max_value: int, index: int, duration: int) -> bool:
        """True during the index-th of max_value phases, each duration cycles long."""
        return self._cycle_counter // duration % max_value == index

    def get_input_names(self) -> list[str]:
        return [item.label for item in Input]

    def get_register_names(self) -> list[str]:
        return [item.label for item in Register]

    def get_coil_names(self) -> list[str]:
        return [item.label for item in Coil]

    def get_charge_stations_level(self) -> tuple[bool, bool]:
        """Levelness of the red and blue charge stations."""
        return self.inputs[Input.RED_CHARGE_STATION_LEVEL], self.inputs[Input.BLUE_CHARGE_STATION_LEVEL]

    def set_charge_station_lights(self, red_state: bool, blue_state: bool) -> None:
        self.coils[Coil.RED_CHARGE_STATION_LIGHT] = red_state
        self.coils[Coil.BLUE_CHARGE_STATION_LIGHT] = blue_state

    def _triple(self, inputs: Sequence[Input], invert: bool) -> tuple[bool, bool, bool]:
        first, second, third = (self.inputs[item] != invert for item in inputs)
        return first, second, third

    def _snapshot(self) -> tuple[tuple[bool, ...], tuple[int, ...], tuple[bool, ...]]:
        return tuple(self.inputs), tuple(self.registers), tuple(self.coils)

    def _connect(self) -> None:
        client = self._client_factory(self.address)
        client.connect()
        log.info("Connected to PLC at %s:%d", self.address, MODBUS_PORT)
        self._client = client
        # Coils may not change on their own, so push them once on connection.
        self._write_coils()

    def _reset_connection(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            client.close()

    def _read_inputs(self) -> bool:
        assert self._client is not None
        try:
            data = self._client.read_discrete_inputs(0, len(self.inputs))
        except (ModbusError, OSError) as exc:
            log.warning("PLC error reading inputs: %s", exc)
            return False
        if len(data) * 8 < len(self.inputs):
            log.warning(
                "Insufficient length of PLC inputs: got %d bytes, expected %d bits.", len(data), len(self.inputs)
            )
            return False
        self.inputs = byte_to_bool(data, len(self.inputs))
        return True

    def _read_registers(self) -> bool:
        assert self._client is not None
        try:
            data = self._client.read_holding_registers(0, len(self.registers))
        except (ModbusError, OSError) as exc:
            log.warning("PLC error reading registers: %s", exc)
            return False
        if len(data) // 2 < len(self.registers):
            log.warning(
                "Insufficient length of PLC registers: got %d bytes, expected %d words.",
                len(data),
                len(self.registers),
            )
            return False
        self.registers = byte_to_uint(data, len(self.registers))
        return True

    def _write_coils(self) -> bool:
        assert self._client is not None
        # The heartbeat lets the PLC disable outputs if the connection is lost.
        self.coils[Coil.HEARTBEAT] = True
        try:
            self._client.write_multiple_coils(0, len(self.coils), bool_to_byte(self.coils))
        except (ModbusError, OSError) as exc:
            log.warning("PLC error writing coils: %s", exc)
            return False
        if self._match_reset_cycles > _MATCH_RESET_PULSE_CYCLES:
            self.coils[Coil.MATCH_RESET] = False
        else:
            self._match_reset_cycles += 1
        return True