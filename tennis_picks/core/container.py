"""
Service Container - explicit wiring of the engine's components.

Every component is built from Settings in one place; nothing is discovered or
registered implicitly.

Usage:
    from tennis_picks.core import ServiceContainer

    store = ServiceContainer.get_pair_store()
    scorer = ServiceContainer.get_bracket_scorer()
    aggregator = ServiceContainer.get_leaderboard_aggregator()

    # Swap storage (before the store is first used)
    ServiceContainer.register_pair_repository(MyDocumentRepository())
"""
from typing import Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from tennis_picks.config import Settings
    from tennis_picks.brackets.scorer import BracketScorer
    from tennis_picks.h2h.store import PairStore
    from tennis_picks.leaderboard.aggregator import LeaderboardAggregator
    from tennis_picks.leaderboard.predictions import PredictionPointsRule
    from .protocols import PairRepository

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Simple dependency injection container.

    Provides lazy initialization of default implementations
    and allows swapping the pair repository.
    """

    _settings: Optional["Settings"] = None
    _repository: Optional["PairRepository"] = None
    _pair_store: Optional["PairStore"] = None
    _bracket_scorer: Optional["BracketScorer"] = None
    _prediction_rule: Optional["PredictionPointsRule"] = None
    _aggregator: Optional["LeaderboardAggregator"] = None

    @classmethod
    def configure(cls, settings: "Settings") -> None:
        """Use explicit settings instead of the environment-loaded singleton."""
        cls.reset()
        cls._settings = settings
        logger.info("Container configured with explicit settings")

    @classmethod
    def get_settings(cls) -> "Settings":
        if cls._settings is None:
            from tennis_picks.config import settings
            cls._settings = settings
        return cls._settings

    @classmethod
    def get_pair_repository(cls) -> "PairRepository":
        if cls._repository is None:
            from .storage import InMemoryPairRepository
            cls._repository = InMemoryPairRepository()
            logger.debug("Initialized default InMemoryPairRepository")
        return cls._repository

    @classmethod
    def get_pair_store(cls) -> "PairStore":
        if cls._pair_store is None:
            from tennis_picks.h2h.store import PairStore
            cls._pair_store = PairStore(repository=cls.get_pair_repository())
        return cls._pair_store

    @classmethod
    def get_bracket_scorer(cls) -> "BracketScorer":
        if cls._bracket_scorer is None:
            from tennis_picks.brackets.scorer import BracketScorer
            scoring = cls.get_settings().scoring
            cls._bracket_scorer = BracketScorer(
                round_points=dict(scoring.round_points),
                champion_bonus=scoring.champion_bonus,
                default_round_points=scoring.default_round_points,
            )
        return cls._bracket_scorer

    @classmethod
    def get_prediction_rule(cls) -> "PredictionPointsRule":
        if cls._prediction_rule is None:
            from tennis_picks.leaderboard.predictions import PredictionPointsRule
            scoring = cls.get_settings().scoring
            cls._prediction_rule = PredictionPointsRule(
                base_points=scoring.base_points,
                confidence_pivot=scoring.confidence_pivot,
                confidence_bonus_per_level=scoring.confidence_bonus_per_level,
                exact_score_bonus=scoring.exact_score_bonus,
            )
        return cls._prediction_rule

    @classmethod
    def get_leaderboard_aggregator(cls) -> "LeaderboardAggregator":
        if cls._aggregator is None:
            from tennis_picks.leaderboard.aggregator import LeaderboardAggregator
            cls._aggregator = LeaderboardAggregator(
                rule=cls.get_prediction_rule(),
                placeholder_template=cls.get_settings().leaderboard.placeholder_name_template,
            )
        return cls._aggregator

    @classmethod
    def register_pair_repository(cls, repository: "PairRepository") -> None:
        """Register a custom pair repository; rebuilds the store on next use."""
        cls._repository = repository
        cls._pair_store = None
        logger.info(f"Registered pair repository: {type(repository).__name__}")

    @classmethod
    def reset(cls) -> None:
        """Reset to defaults (for testing)."""
        cls._settings = None
        cls._repository = None
        cls._pair_store = None
        cls._bracket_scorer = None
        cls._prediction_rule = None
        cls._aggregator = None
