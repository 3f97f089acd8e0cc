"""LIO Library.

Information flow control for effectful Python code: labeled values, labeled
computations and labeled sources and sinks.
"""

from .error import ComputationStateError, FlowViolationError, UnknownPrincipalError
from .io import (
    Output,
    Reader,
    Sink,
    Source,
    Writer,
    conditional_output,
    input_from,
    output_to,
    output_with_witness,
    snk,
    src,
)
from .io_async import (
    AsyncOutput,
    AsyncReader,
    AsyncSink,
    AsyncSource,
    AsyncWriter,
    async_snk,
    async_src,
    conditional_output_async,
    input_async,
    output_async,
    output_async_explicit,
    parallel_input_async,
)
from .label import Labeled, label, label_of, unsafe_value_of, up_label
from .lattice import BOT, TOP, Level, Principal, can_flow_to, glb, join, level, lub, meet
from .monad import (
    LIO,
    Computation,
    Continuation,
    Signature,
    State,
    bind,
    continuation,
    map_lio,
    ret,
    sequence,
    to_labeled,
    unlabel,
    unsafe_run_lio,
)
from .monad_async import (
    AsyncLIO,
    bind_async,
    map_async,
    ret_async,
    sequence_async,
    to_labeled_async,
    unlabel_async,
    unsafe_run_async_lio,
)
from .principals import Principals
from .witness import FlowWitness

__all__ = [
    # Lattice
    "Principal",
    "Level",
    "BOT",
    "TOP",
    "level",
    "can_flow_to",
    "join",
    "meet",
    "lub",
    "glb",
    "Principals",
    # Labeled values
    "Labeled",
    "label",
    "label_of",
    "unsafe_value_of",
    "up_label",
    "FlowWitness",
    # Computations
    "Computation",
    "State",
    "Signature",
    "Continuation",
    "continuation",
    "LIO",
    "ret",
    "unlabel",
    "bind",
    "to_labeled",
    "map_lio",
    "sequence",
    "unsafe_run_lio",
    "AsyncLIO",
    "ret_async",
    "unlabel_async",
    "bind_async",
    "to_labeled_async",
    "map_async",
    "sequence_async",
    "unsafe_run_async_lio",
    # I/O
    "Reader",
    "Writer",
    "Source",
    "Sink",
    "src",
    "snk",
    "Output",
    "input_from",
    "output_to",
    "output_with_witness",
    "conditional_output",
    "AsyncReader",
    "AsyncWriter",
    "AsyncSource",
    "AsyncSink",
    "async_src",
    "async_snk",
    "AsyncOutput",
    "input_async",
    "output_async",
    "output_async_explicit",
    "parallel_input_async",
    "conditional_output_async",
    # Errors
    "FlowViolationError",
    "ComputationStateError",
    "UnknownPrincipalError",
]
