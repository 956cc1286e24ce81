import logging

from pykairos import Deferred, Executor, Scheduler, to_async

logging.basicConfig(level=logging.CRITICAL)

scheduler = Scheduler(name="demo")
executor = Executor(scheduler)


def later(value):
    """Deferred settled by a macro item, standing in for a timer callback."""
    deferred = Deferred(scheduler)
    scheduler.enqueue_macro(lambda: deferred.resolve(value))
    return deferred


@to_async(executor)
def basic_async_flow():
    result1 = yield Deferred.resolved(scheduler, 1)
    result2 = yield Deferred.resolved(scheduler, result1 + 2)
    return result2


@to_async(executor)
def sync_values():
    a = yield 10
    b = yield a + 5
    return b


@to_async(executor)
def multiple_yields():
    step1 = yield later(2)
    step2 = yield step1 * 3
    step3 = yield later(step2 + 4)
    return step3


@to_async(executor)
def recovers():
    try:
        yield Deferred.rejected(scheduler, ConnectionError("offline"))
    except ConnectionError as e:
        print(f"recovered from {e!r}")
        return "fallback"


def report(name):
    return (
        lambda value: print(f"{name}: {value}"),
        lambda error: print(f"{name} failed: {error!r}"),
    )


def main():
    basic_async_flow().on_settle(*report("basic async flow"))      # 3
    sync_values().on_settle(*report("sync values"))                # 15
    multiple_yields().on_settle(*report("multiple yields"))        # 10
    recovers().on_settle(*report("recovers"))                      # fallback

    scheduler.run()


if __name__ == "__main__":
    main()
