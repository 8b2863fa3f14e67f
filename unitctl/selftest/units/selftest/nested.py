"""Nested units see enclosing bindings; siblings never see each other's."""

greeting = "hello"


@unit
def inner(ctx):
    @ctx.unit
    def innermost(ctx):
        ctx.check(lambda: greeting == "hello")
        ctx.remediate(lambda: None)

    ctx.require("innermost")
    ctx.check(lambda: "innermost" in ctx.scope)
    ctx.remediate(lambda: None)


@unit
def sibling(ctx):
    ctx.check(lambda: "innermost" not in ctx.scope)
    ctx.remediate(lambda: None)


require("inner")
require("sibling")


@check
def isolated():
    return "inner" in ctx.scope and "innermost" not in ctx.scope


@remediate
def explain():
    say("nested definitions leaked between scopes")
