#!/usr/bin/env python3

import pyparsing as pp

from functools import lru_cache
from typing import Optional

from wlast import *

pp.ParserElement.enable_packrat()

# an opcode is a whole token; `CHSx` is not CHS
kw = {op: pp.Regex(rf'{op.value}(?!\S)') for op in Opcode}
sup_kw = {op: pp.Suppress(k) for op, k in kw.items()}

name = pp.Regex(r'\S+')
name.set_name('variable')
int_lit = pp.Regex(r'[+-]?[0-9]+(?!\S)')
int_lit.set_parse_action(lambda toks: int(toks[0]))
int_lit.set_name('integer')

varint = sup_kw[Opcode.VARINT] - name - int_lit
varint.set_parse_action(lambda toks: VarInt(*toks))
varlist = sup_kw[Opcode.VARLIST] - name - pp.Group(name[...], True)
varlist.set_parse_action(lambda toks: VarList(*toks))
combine = sup_kw[Opcode.COMBINE] - name - name
combine.set_parse_action(lambda toks: Combine(*toks))
get = sup_kw[Opcode.GET] - name - int_lit - name
get.set_parse_action(lambda toks: Get(*toks))
set_ = sup_kw[Opcode.SET] - name - int_lit - name
set_.set_parse_action(lambda toks: Set(*toks))
copy = sup_kw[Opcode.COPY] - name - name
copy.set_parse_action(lambda toks: Copy(*toks))
chs = sup_kw[Opcode.CHS] - name
chs.set_parse_action(lambda toks: Chs(*toks))
add = sup_kw[Opcode.ADD] - name - name
add.set_parse_action(lambda toks: Add(*toks))
if_ = sup_kw[Opcode.IF] - name - int_lit
if_.set_parse_action(lambda toks: If(*toks))
hlt = kw[Opcode.HLT].copy()
hlt.set_parse_action(lambda: Hlt())

instruction = varint | varlist | combine | get | set_ | copy | chs | add | if_ | hlt
instruction.set_name('instruction')

def int_literal(token: str) -> Optional[int]:
    try:
        value, = int_lit.parse_string(token, parse_all=True)
    except pp.ParseException:
        return None
    assert isinstance(value, int)
    return value

def _diagnose(line: str) -> str:
    tokens = line.split()
    if len(tokens) == 0:
        return 'empty instruction'
    op, *args = tokens
    try:
        opcode = Opcode(op)
    except ValueError:
        return f'unknown opcode `{op}`'
    expected = arity[opcode]
    if expected is None:
        if len(args) == 0:
            return f'`{op}` expects at least 1 argument, got 0'
    elif len(args) != expected:
        return f'`{op}` expects {expected} argument{"s" if expected != 1 else ""}, got {len(args)}'
    return f'malformed integer operand in `{op}` instruction'

@lru_cache(maxsize=1024)
def decode(line: str) -> Instruction:
    # tokens are separated exactly as str.split separates them
    tokens = ' '.join(line.split())
    try:
        inst, = instruction.parse_string(tokens, parse_all=True)
    except pp.ParseBaseException as pe:
        raise DecodeError(_diagnose(line)) from pe
    assert isinstance(inst, Instruction)
    return inst
