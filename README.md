# fieldcontrol

Building blocks for running a robotics competition field: the match
schedule, residual cards, awards and their lower-third captions, alliance
selection, match lists for the control, review and queueing screens,
admin sessions, and the Modbus link to the field PLC.

The package has no third-party dependencies.

## What is in it

| Module | Purpose |
| --- | --- |
| `fieldcontrol.records` | `Team`, `Match`, `MatchResult`, `Award`, `LowerThird`, `Alliance`, `ScheduleBlock`, the `MatchStatus` and `AwardType` enums, and the in-memory `EventStore` that holds them |
| `fieldcontrol.schedule` | `build_random_schedule` fills a pre-randomized CSV schedule template with real teams and match times; `count_matches` totals the schedule blocks |
| `fieldcontrol.awards` | `create_or_update_award`, `delete_award`, `create_or_update_winner_and_finalist_awards` |
| `fieldcontrol.cards` | `calculate_team_cards` marks every team carded in a completed match of a given type |
| `fieldcontrol.alliance_selection` | `AllianceSelection` runs the draft: `start`, `update`, `next_cell`, `finalize`, `reset`; `parse_start_time` reads the playoff start time |
| `fieldcontrol.auth` | `Authenticator` for admin login and session checks, `login_redirect` |
| `fieldcontrol.displays` | `enforce_display_configuration` and `extract_ip_address` for display clients |
| `fieldcontrol.match_play_list` | `build_match_play_list` for the match control screen, unplayed matches first |
| `fieldcontrol.match_review` | `build_match_review_list` for the result review screen |
| `fieldcontrol.queueing` | `upcoming_matches` for the queueing display |
| `fieldcontrol.api` | helpers behind the event API: `bracket_type`, `highest_played_match`, `team_nicknames`, `avatar_path` |
| `fieldcontrol.commands` | argument checks for match control commands |
| `fieldcontrol.commit` | rules applied when a match score is committed: play numbers, tiebreakers, publishing, backup labels |
| `fieldcontrol.modbus` | `ModbusTcpClient`, a small blocking Modbus/TCP client |
| `fieldcontrol.plc` | `ModbusPlc`, the field PLC I/O loop, and the bit packing helpers |

## Examples

Packing and unpacking PLC data:

```python
from fieldcontrol.plc import bool_to_byte, byte_to_bool, byte_to_uint

bool_to_byte([True, True, False, False, True, False, False, False, False, True])
# b'\x13\x02'

byte_to_bool(bytes([7, 254, 3]), 17)
# [True, True, True, False, False, False, False, False, False,
#  True, True, True, True, True, True, True, True]

byte_to_uint(bytes([1, 77, 2, 253, 21, 179]), 3)
# [333, 765, 5555]
```

Running the PLC loop in a thread until told to stop; each change of the
I/O values is passed to the callback:

```python
import threading
from fieldcontrol.plc import ModbusPlc

plc = ModbusPlc(on_io_change=print)
plc.set_address("10.0.100.40")
stop = threading.Event()
threading.Thread(target=plc.run, args=(stop,), daemon=True).start()
```

`ModbusPlc.cycle()` runs a single exchange, which is handy with a stand-in
client passed as `client_factory`.

Choosing the bracket drawing for a playoff:

```python
from fieldcontrol.api import bracket_type

bracket_type("single", 6)   # "8"
bracket_type("double", 8)   # "double"
```

Building a qualification schedule from a template directory holding files
named `<teams>_<matches per team>.csv`:

```python
import random
from fieldcontrol.schedule import build_random_schedule

matches = build_random_schedule(teams, schedule_blocks, "qualification",
                                "schedules", random.Random(0))
```

A missing template or a template of the wrong length raises
`fieldcontrol.schedule.ScheduleError`.

## Errors

Each module raises its own exception type where an operation cannot go
ahead: `ScheduleError`, `AwardError`, `CardError`,
`AllianceSelectionError`, `AuthError`, `CommandError` and `ModbusError`.
The message is the one meant for the operator.

## What it does not do

- There is no web server, no pages or websockets and no command to start
  anything: the modules supply the logic such handlers would call.
- Records live only in memory in `EventStore`; nothing is saved to disk
  and there are no database backups, only the label `backup_label` gives.
- Qualification rankings, score summaries and the playoff bracket itself
  are not computed here.
- Nothing is published to an online results service; `should_publish`
  only answers whether a match would be.