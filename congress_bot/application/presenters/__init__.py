from .bot_presenter import BotPresenter

__all__ = ["BotPresenter"]
