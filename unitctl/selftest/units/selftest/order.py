"""Prerequisites resolve in declaration order, each before its parent."""

STEPS = ("order-first", "order-second", "order-third")

seen = []


def step(ctx):
    @ctx.check
    def recorded():
        return ctx.name in seen

    @ctx.remediate
    def record():
        seen.append(ctx.name)


for step_name in STEPS:
    unit(step_name)(step)
    require(step_name)


@check
def in_order():
    return seen == list(STEPS)


@remediate
def explain():
    say(f"resolved out of order: {seen}")
