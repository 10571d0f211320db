"""Examples demonstrating meterline bars, stacking, messages and monitor mode"""

import sys
import time
import random
import threading

from meterline import Animation, Bar, Output, monitor


def example_0():
    print("=== Example 0: Stacked bars updated from threads ===")

    def worker(position, total):
        with Bar(total=total, desc=f"Worker {position}", position=position, leave=position == 0) as bar:
            for _ in range(total):
                time.sleep(random.uniform(0.005, 0.03))
                bar.update(1)

    threads = [threading.Thread(target=worker, args=(i, 100 + 40 * i)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # Move below the stacked rows
    sys.stderr.write('\n' * 4)


def example_1():
    print("=== Example 1: Default bar ===")

    with Bar(total=100, desc="Processing items") as bar:
        for _ in range(100):
            time.sleep(0.02)
            bar.update(1)


def example_2():
    print("=== Example 2: Animations ===")

    for animation in Animation:
        with Bar(total=60, desc=animation.value, animation=animation, ncols=30) as bar:
            for _ in range(60):
                time.sleep(0.01)
                bar.update(1)


def example_3():
    print("=== Example 3: Colours ===")

    with Bar(total=100, colour="#a485ca") as bar:
        for _ in range(100):
            time.sleep(0.01)
            bar.update(1)

        bar.set_colour("#da70d6")
        bar.refresh()


def example_4():
    print("=== Example 4: Indefinite mode, unit scaling and postfix ===")

    with Bar(unit="B", unit_scale=True, unit_divisor=1024, desc="Downloading") as bar:
        for chunk in range(200):
            time.sleep(0.01)
            bar.set_postfix(f"chunk={chunk}")
            bar.update(random.randint(2048, 65536))


def example_5():
    print("=== Example 5: Messages between updates ===")

    with Bar(total=10, desc="Epochs", output=Output.STDOUT) as bar:
        for epoch in range(10):
            time.sleep(0.2)
            bar.write(f"Epoch {epoch} finished, loss={random.random():.4f}")
            bar.update(1)


def example_6():
    print("=== Example 6: Input between updates ===")

    with Bar(total=10) as bar:
        for i in range(10):
            if i == 5 and bar.input("Break loop [y/n]: ").strip() == "y":
                break
            time.sleep(0.1)
            bar.update(1)


def example_7():
    print("=== Example 7: Monitor mode ===")

    shared, thread = monitor(Bar(total=10, desc="Slow steps"), 0.5)

    for _ in range(10):
        time.sleep(1.5)
        shared.update(1)

    thread.join()
    shared.bar.close()


if __name__ == "__main__":
    import logging

    logging.basicConfig(level=logging.DEBUG)

    for i in range(0, 7 + 1):
        if i != 0:
            time.sleep(1)
        globals()[f"example_{i}"]()
