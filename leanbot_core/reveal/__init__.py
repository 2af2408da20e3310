from leanbot_core.reveal.text_reveal import RevealCallback, TextRevealScheduler

__all__ = ["RevealCallback", "TextRevealScheduler"]
