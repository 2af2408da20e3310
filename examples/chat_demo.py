"""Minimal terminal chat against the configured webhook."""

import asyncio

from leanbot_core import build_pipeline
from leanbot_core.config.settings import settings
from leanbot_core.presentation import present, render_plain
from leanbot_core.reveal import TextRevealScheduler


def _print_notification(notification):
    print(f"[{notification.title}] {notification.description}")


def _add_to_cart(product_id: int) -> None:
    print(f"(added product {product_id} to cart)")


async def main() -> None:
    pipeline = build_pipeline(notifier=_print_notification)
    print("LeanBot AI - type 'quit' to exit")
    print("Session:", pipeline.session.session_id)
    while True:
        text = await asyncio.to_thread(input, "You: ")
        if text.strip().lower() in {"quit", "exit"}:
            break
        reply = await pipeline.send(text)
        if reply is None:
            continue
        rendered = render_plain(present(reply, _add_to_cart))
        printed = 0

        def show(displayed: str, complete: bool) -> None:
            nonlocal printed
            print(displayed[printed:], end="" if not complete else "\n", flush=True)
            printed = len(displayed)

        print("Bot: ", end="")
        async with TextRevealScheduler.from_settings(rendered, settings, on_update=show) as reveal:
            await reveal.wait_complete()
        if not settings.reveal_enabled:
            print(rendered)


if __name__ == "__main__":
    asyncio.run(main())
