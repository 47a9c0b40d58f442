from __future__ import annotations

from typing import Callable, List

from .machine import TapeMachine
from .state import MachineState


def render_memory(state: MachineState, radius: int = 10) -> str:
    cells: List[str] = []
    for i, value in state.window(radius):
        cells.append(f"[{value}]" if i == state.data_pointer else str(value))
    return f"Memory state around pointer ({state.data_pointer}):\n" + " ".join(cells)


def render_state(machine: TapeMachine) -> str:
    st = machine.state
    lines = [
        "Current state:",
        f"  Memory pointer: {st.data_pointer} (value: {st.current_cell})",
    ]
    ip_line = f"  Instruction pointer: {st.instruction_pointer}"
    nxt = machine.next_instruction
    if nxt is not None:
        ip_line += f" (next instruction: '{nxt}')"
    lines.append(ip_line)
    return "\n".join(lines)


def debug_session(
    machine: TapeMachine,
    read_command: Callable[[str], str],
    write: Callable[[str], None],
    *,
    radius: int = 10,
) -> int:
    """
    Drive a loaded machine one instruction at a time.

    Commands: empty line steps, 'c' runs to the end, 'm' shows memory,
    'q' quits. Returns the number of instructions executed.
    """
    executed = 0
    write(render_state(machine))
    while not machine.halted:
        try:
            cmd = read_command("(bfx) ").strip().lower()
        except EOFError:
            break

        if cmd == 'q':
            break
        if cmd == 'm':
            write(render_memory(machine.state, radius))
            continue
        if cmd == 'c':
            while machine.step():
                executed += 1
            break
        if cmd:
            write("Commands: <Enter> step, c continue, m memory, q quit")
            continue

        machine.step()
        executed += 1
        write(render_state(machine))

    if machine.halted:
        write("Program finished.")
    return executed
