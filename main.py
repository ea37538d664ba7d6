"""
wordfilter: demo entry point

Creates the shared infrastructure (EventBus, Config, FilterEngine),
then screens a batch of sample chat messages the way the chat server
would and prints the outcome of each.

    python main.py [preset] [extra message ...]
"""

import logging
import sys

from PyQt6.QtCore import QCoreApplication

from wordfilter import Config, EventBus, FilterEngine, MessageGate

SAMPLE_MESSAGES = [
    "Hello everyone, how are you today?",
    "This is damn annoying!",
    "What the hell is going on?",
    "This is a classic example",
    "Click here to make money fast",
    "I hate you and I will attack you",
    "这真的很垃圾",
    "你是个傻逼",
    "HELLO EVERYONE!!!!!",
    "soooooo bored",
    "Have a great day!",
]


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QCoreApplication(sys.argv[:1])

    args = sys.argv[1:]
    preset = args.pop(0) if args else None

    # Shared infrastructure
    bus = EventBus()
    config = Config(bus)
    engine = FilterEngine(preset=preset, event_bus=bus, config=config)
    gate = MessageGate(engine)

    stats = engine.get_stats()
    print(f"preset={stats['current_preset']} strategy={stats['config']['strategy']} "
          f"categories={','.join(stats['enabled_categories'])}\n")

    for i, message in enumerate(SAMPLE_MESSAGES + args, start=1):
        decision = gate.screen(message, username="demo", room="lobby")
        verdict = decision.verdict
        print(f"{i:2d}. {message!r}")
        print(f"    severity={verdict.severity.value} "
              f"categories={verdict.filtered_categories} "
              f"rules={verdict.special_rule_violations}")
        if decision.deliver:
            print(f"    relayed: {decision.text!r}")
        else:
            print(f"    blocked: {decision.reason}")

    del app


if __name__ == "__main__":
    main()
