import logging

from pykairos import Scheduler

logging.basicConfig(level=logging.CRITICAL)


def main():
    scheduler = Scheduler(name="demo")

    print("a")

    def b():
        print("b")
        scheduler.enqueue_micro(lambda: print("c"))
        scheduler.enqueue_macro(lambda: print("d"))

    scheduler.enqueue_micro(b)
    scheduler.enqueue_macro(lambda: print("e"))

    print("f")

    summary = scheduler.run()
    # a, f, b, c, e, d
    print(f"ran {summary.micro_items} micro and {summary.macro_items} macro items")


if __name__ == "__main__":
    main()
