#!/usr/bin/env python3

import os
import sys

import openai

DEFAULT_MODEL = 'gpt-4o-mini'

_instructions = '''\
You help debug programs written in WL, a line-based language with one
instruction per line. Lines are numbered from 0 and IF jumps to a line
number. The instructions are:
VARINT x i, VARLIST y a1 ... an, COMBINE l1 l2, GET x i l, SET x i l,
COPY l1 l2, CHS x, ADD x y, IF x i, HLT.
Lists are shared by reference; only COPY makes an independent copy.
When you propose a fix, give the complete corrected program in a single
fenced code block.'''

def default_model() -> str:
    return os.environ.get('WL_AI_MODEL', DEFAULT_MODEL)

def update_program(response: str, filename: str) -> bool:
    try:
        start = response.index('```')
        end = response.index('```', start + 3)
    except ValueError:
        return False
    yn = input('Apply proposed changes and retry? (Y/n) ')
    while True:
        if yn in ['y', 'Y']:
            # skip the rest of the opening fence line, e.g. ```wl
            body = response[start+3:end]
            new_program = body[body.find('\n')+1:]
            with open(filename, 'w') as f:
                f.write(new_program)
            return True
        elif yn in ['n', 'N']:
            return False
        else:
            yn = input('invalid input (Y/n) ')

def _gen_message(filename: str, err: str) -> str:
    with open(filename, 'r') as f:
        prog = f.read()
    return f'What is wrong with the following program: \n```\n{prog}\n```\n\
The interpreter stopped with the following error: {err}.'

def ask_assistant(filename: str, err: str, client: openai.Client, model: str) -> str:
    content = _gen_message(filename, err)
    print(f'{filename}:{err}', file=sys.stderr)
    print(f'Asking {model}...\n', file=sys.stderr)
    completion = client.chat.completions.create(
        model=model,
        messages=[
            {'role': 'system', 'content': _instructions},
            {'role': 'user', 'content': content},
        ],
    )
    return completion.choices[0].message.content or ''
