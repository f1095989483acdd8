"""
Pass: rewrite_body

Replaces a method body with a shim that evaluates the original body and
converts the value to the rewritten result type.

Transform shape:
before:
  fn items(&self) -> Vec<Foo> { load() }
after:
  fn items(&self) -> SemanticNonNull<Vec<SemanticNonNull<Foo>>> {
      let result: Vec<Foo> = { load() };
      unsafe { ::std::mem::transmute::<_, SemanticNonNull<Vec<SemanticNonNull<Foo>>>>(result) }
  }

streaming:
  fn ticks(&self) -> impl Stream<Item = SemanticNonNull<i32>> {
      let result = { interval() };
      ::tokio_stream::StreamExt::map(result, |v| unsafe { ::std::mem::transmute::<i32, SemanticNonNull<i32>>(v) })
  }

The conversion is only sound because every marker type is a transparent
single-field carrier of its argument, and it is only emitted for type pairs
produced by wrap_field_type.
"""

from __future__ import annotations

from copy import deepcopy

from ..syntax.exprs import Block, Expr, Let, Reinterpret, StreamMap, Var
from ..syntax.types import Type
from .context import PassContext


PASS_NAME = "rewrite_body"
RESULT_NAME = "result"
ITEM_NAME = "v"


def apply(
    body: Expr,
    orig_return_type: Type,
    new_return_type: Type,
    orig_field_type: Type,
    new_field_type: Type,
    streaming: bool,
    ctx: PassContext,
) -> Block:
    if streaming:
        # Lazy element-wise map; ordering and restartability come from the stream itself.
        convert = Reinterpret(
            value=Var(ITEM_NAME),
            source=deepcopy(orig_field_type),
            target=deepcopy(new_field_type),
            function=deepcopy(ctx.reinterpret_fn),
        )
        return Block(
            stmts=[Let(name=RESULT_NAME, ty=None, value=body)],
            tail=StreamMap(
                stream=Var(RESULT_NAME),
                param=ITEM_NAME,
                body=convert,
                function=deepcopy(ctx.stream_map_fn),
            ),
        )
    return Block(
        stmts=[Let(name=RESULT_NAME, ty=deepcopy(orig_return_type), value=body)],
        tail=Reinterpret(
            value=Var(RESULT_NAME),
            source=None,
            target=deepcopy(new_return_type),
            function=deepcopy(ctx.reinterpret_fn),
        ),
    )
