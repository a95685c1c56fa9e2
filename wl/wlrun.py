#!/usr/bin/env python3

import wlast
import wlparser

import itertools
import optparse
import sys

from typing import Optional

from wlinterpreter import State, Vm

SEPARATOR = '+' * 41

def parse_args(argv: list[str]) -> tuple[optparse.Values, list[str]]:
    usage = 'usage: %prog [options] filename'
    p = optparse.OptionParser(usage=usage)
    p.add_option('--run',
                 action='store_true',
                 default=False,
                 help='run program to completion without prompting'
                 )
    p.add_option('--trace',
                 action='store_true',
                 default=False,
                 help='with --run, display machine state step by step'
                 )
    p.add_option('--max-steps',
                 metavar='N',
                 action='store',
                 type='int',
                 dest='max_steps',
                 help='give up after executing N instructions'
                 )
    p.add_option('--dis',
                 action='store_true',
                 default=False,
                 help='decode and list the program without running it'
                 )
    p.add_option('--ai',
                 action='store_true',
                 default=False,
                 help='ask ai assistant in case of an error'
                 )
    p.add_option('--interactive',
                action='store_true',
                default=False,
                help='interactively apply changes made by the assistant'
    )
    p.add_option('--model',
                 action='store',
                 type='string',
                 help='model asked by --ai (default: $WL_AI_MODEL or gpt-4o-mini)'
                 )
    return p.parse_args(argv)

def load_program(filename: str) -> list[str]:
    # only '\n' (or '\r\n') ends a line; IF targets count these lines
    with open(filename, 'r', newline='') as f:
        lines = f.read().split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]

def print_memory(vm: Vm):
    _, memory = vm.snapshot()
    print('Current memory:')
    for var, value in memory.items():
        print(f'{var} = {value}')
    print(SEPARATOR)

def step(vm: Vm) -> State:
    line = vm.pc
    executed = vm.steps
    state = vm.step()
    if vm.steps != executed:
        print(f'Execute line: {line}')
        print_memory(vm)
    return state

def execute_all(vm: Vm, max_steps: Optional[int], trace: bool) -> State:
    if not trace:
        return vm.run(max_steps)
    budget = itertools.count() if max_steps is None else range(max_steps)
    for _ in budget:
        if step(vm) != State.RUNNING:
            break
    return vm.state

def format_fault(vm: Vm) -> str:
    assert vm.fault is not None
    return f'{vm.pc}: error: {vm.fault}\n{vm.prog[vm.pc]}'

def report(filename: str, vm: Vm, max_steps: Optional[int]) -> int:
    if vm.state == State.FAULTED:
        print(f'{filename}:{format_fault(vm)}', file=sys.stderr)
        return 1
    elif vm.state == State.RUNNING:
        print(f'{filename}: error: no halt after {max_steps} steps', file=sys.stderr)
        return 1
    else:
        assert vm.state == State.HALTED
        return 0

def run(filename: str, max_steps: Optional[int], trace: bool) -> int:
    vm = Vm(load_program(filename))
    state = execute_all(vm, max_steps, trace)
    if state == State.HALTED and not trace:
        print(f'Halted at line {vm.pc} after {vm.steps} steps')
        print_memory(vm)
    return report(filename, vm, max_steps)

def command_loop(filename: str, max_steps: Optional[int]) -> int:
    vm = Vm(load_program(filename))
    while True:
        try:
            command = input('Enter command (o/a/q): ').strip().lower()
        except EOFError:
            break
        if command == 'o':
            step(vm)
        elif command == 'a':
            execute_all(vm, max_steps, True)
        elif command == 'q':
            break
        else:
            print("Invalid command. Please enter 'o', 'a', or 'q'.")
            continue
        if vm.state != State.RUNNING or command == 'a':
            if report(filename, vm, max_steps) == 0:
                print('Program halted.')
    return 1 if vm.state == State.FAULTED else 0

def dis(filename: str) -> int:
    status = 0
    for i, line in enumerate(load_program(filename)):
        try:
            inst = wlparser.decode(line)
            print(f'{i:04} {inst!r}')
        except wlast.DecodeError as e:
            print(f'{filename}:{i}: error: {e}\n{line}', file=sys.stderr)
            status = 1
    return status

def ai(filename: str, max_steps: Optional[int], interactive: bool, model: Optional[str]) -> int:
    import wlai
    import openai

    if model is None:
        model = wlai.default_model()

    def ask(client: openai.Client, err: str) -> Optional[str]:
        try:
            return wlai.ask_assistant(filename, err, client, model)
        except openai.APIConnectionError as e:
            print('The openai server could not be reached', file=sys.stderr)
            print(e.__cause__, file=sys.stderr)  # an underlying Exception, likely raised within httpx.
        except openai.RateLimitError as e:
            print('A 429 status code was received; rate limit error.', file=sys.stderr)
        except openai.APIStatusError as e:
            print(f'openai: {e.status_code}: {e.response}', file=sys.stderr)
        return None

    try:
        client = openai.OpenAI()
    except openai.OpenAIError as e:
        print(f'error: openai: {e}', file=sys.stderr)
        return 1
    while True:
        vm = Vm(load_program(filename))
        if vm.run(max_steps) != State.FAULTED:
            if vm.state == State.HALTED:
                print_memory(vm)
            return report(filename, vm, max_steps)
        response = ask(client, format_fault(vm))
        if response is None:
            return 1
        print(response, file=sys.stderr)
        if not interactive:
            return 1
        if not wlai.update_program(response, filename):
            return 1

def main(argv: list[str]) -> Optional[int]:
    options, args = parse_args(argv)
    try:
        filename = args[1]
    except IndexError:
        print('error: no file provided', file=sys.stderr)
        return 1
    try:
        if options.dis:
            return dis(filename)
        elif options.ai:
            return ai(filename, options.max_steps, options.interactive, options.model)
        elif options.run:
            return run(filename, options.max_steps, options.trace)
        else:
            return command_loop(filename, options.max_steps)
    except OSError as os_err:
        print(f'error: {os_err.filename}: {os_err.strerror}', file=sys.stderr)
        return 1

def entry():
    sys.exit(main(sys.argv))

if __name__ == '__main__':
    entry()
