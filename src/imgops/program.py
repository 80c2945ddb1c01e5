## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable
from dataclasses import replace
from collections import defaultdict

from .types import Program, Execute, EnvironmentAdd
from .errors import UnboundModifierError
from .modifiers import consumers_of


def assemble(instructions: Iterable) -> Program:
    """Collect instructions in emission order, binding each modifier to the operation it applies to.

    A `set <operation> ...` modifier binds to the next occurrence of that operation and fails if none
    follows. A bare modifier binds to the next operation that reads it, and stays unbound otherwise.
    Any error raised while iterating propagates; no partial program is ever returned.
    """
    items = []
    declared = defaultdict(list)    # OperationId -> indices of `set` modifiers awaiting it.
    environment = []                # Indices of bare modifiers awaiting a consumer.

    for instruction in instructions:
        index = len(items)
        if isinstance(instruction, Execute):
            op_id = instruction.operation.id
            for i in declared.pop(op_id, []):
                items[i] = replace(items[i], target=index)
            for i in [i for i in environment if op_id in consumers_of(items[i].modifier)]:
                items[i] = replace(items[i], target=index)
                environment.remove(i)
        elif isinstance(instruction, EnvironmentAdd) and instruction.target is None:
            if instruction.for_operation is not None:
                declared[instruction.for_operation].append(index)
            else:
                environment.append(index)
        items.append(instruction)

    if declared:
        index = min(i for pending in declared.values() for i in pending)
        pending = items[index]
        raise UnboundModifierError(f"Modifier {type(pending.modifier).__name__} was set for `{pending.for_operation}`, "
                                   f"but no `{pending.for_operation}` operation follows it.",
                                   token=str(pending.for_operation))
    return Program(items)
