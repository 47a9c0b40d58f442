#!/usr/bin/env python3
"""
Test single-step execution and the text state views.
"""

import io

import pytest

from bfx.config import AddressingPolicy, MachineOptions
from bfx.debugger import debug_session, render_memory, render_state
from bfx.errors import PointerOutOfRange, UnmatchedOpenBracket
from bfx.machine import TapeMachine


def make_machine(code, input_data=b"", **option_kwargs):
    stdout = io.BytesIO()
    machine = TapeMachine(MachineOptions(**option_kwargs), stdin=io.BytesIO(input_data), stdout=stdout)
    machine.load(code)
    return machine, stdout


def test_step_executes_one_instruction():
    machine, stdout = make_machine("+.")
    assert machine.step() is True
    assert machine.state.current_cell == 1
    assert machine.state.instruction_pointer == 1
    assert stdout.getvalue() == b""

    assert machine.step() is True
    assert stdout.getvalue() == bytes([1])

    assert machine.step() is False
    assert machine.halted
    assert machine.state.steps == 2


def test_step_on_empty_program():
    machine, _ = make_machine("")
    assert machine.step() is False


def test_step_through_loop_jumps():
    machine, _ = make_machine("[-]+")
    machine.step()
    # '[' on a zero cell lands one past its ']'
    assert machine.state.instruction_pointer == 3


@pytest.mark.parametrize("code,input_data", [
    ("++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.", b""),
    (",[.[-],]", b"abc"),
    ("+++[>++<-]>[<+>-]<.", b""),
    ("<<<+>>>-", b""),
])
def test_stepping_matches_running(code, input_data):
    """Stepping to the end gives the same tape, pointers and output as run()."""
    stepped, stepped_out = make_machine(code, input_data)
    while stepped.step():
        pass

    ran, ran_out = make_machine(code, input_data)
    assert ran.run().ok

    assert stepped_out.getvalue() == ran_out.getvalue()
    assert stepped.state.data_pointer == ran.state.data_pointer
    assert stepped.state.instruction_pointer == ran.state.instruction_pointer
    assert stepped.state.steps == ran.state.steps
    assert (stepped.state.tape == ran.state.tape).all()


def test_step_bounded_raises_and_keeps_state():
    machine, _ = make_machine("+<", policy=AddressingPolicy.BOUNDED)
    assert machine.step()
    with pytest.raises(PointerOutOfRange):
        machine.step()
    assert machine.state.instruction_pointer == 1
    assert machine.state.current_cell == 1
    assert not machine.halted


def test_step_resolves_deferred_jumps():
    machine, _ = make_machine("[", resolve_on_load=False)
    with pytest.raises(UnmatchedOpenBracket):
        machine.step()


def test_state_window():
    machine, _ = make_machine(">>+")
    while machine.step():
        pass
    assert machine.state.window(1) == [(1, 0), (2, 1), (3, 0)]
    assert machine.state.window(5)[0] == (0, 0)


def test_render_memory_marks_current_cell():
    machine, _ = make_machine("+>++")
    while machine.step():
        pass
    text = render_memory(machine.state, radius=2)
    assert text.splitlines()[0] == "Memory state around pointer (1):"
    assert text.splitlines()[1] == "1 [2] 0 0"


def test_render_state():
    machine, _ = make_machine("+-")
    machine.step()
    text = render_state(machine)
    assert "Memory pointer: 0 (value: 1)" in text
    assert "Instruction pointer: 1 (next instruction: '-')" in text


def test_debug_session_commands():
    machine, stdout = make_machine("+++.")
    commands = iter(["", "m", "x", "c"])
    shown = []

    executed = debug_session(machine, lambda prompt: next(commands), shown.append, radius=1)

    assert executed == 4
    assert machine.halted
    assert stdout.getvalue() == bytes([3])
    assert any(s.startswith("Memory state") for s in shown)
    assert any(s.startswith("Commands:") for s in shown)
    assert shown[-1] == "Program finished."


def test_debug_session_quit_and_eof():
    machine, _ = make_machine("+++")
    assert debug_session(machine, lambda prompt: "q", lambda s: None) == 0
    assert machine.state.instruction_pointer == 0

    def no_more(prompt):
        raise EOFError

    assert debug_session(machine, no_more, lambda s: None) == 0
