"""
WiFiAnalytics - Semantic Package

Semantic view model and intelligence agent configuration.
"""

from wifi_analytics.semantic.semantic_view import (
    Dimension,
    Fact,
    Metric,
    Relationship,
    SemanticTable,
    SemanticView,
    SemanticViewError,
    build_network_analytics_view
)
from wifi_analytics.semantic.agent import (
    AGENT_NAME,
    AgentConfig,
    AgentQuestion,
    CortexAnalystTool,
    build_agent_config,
    build_test_questions,
    questions_table_ddl
)

__all__ = [
    "Dimension",
    "Fact",
    "Metric",
    "Relationship",
    "SemanticTable",
    "SemanticView",
    "SemanticViewError",
    "build_network_analytics_view",
    "AGENT_NAME",
    "AgentConfig",
    "AgentQuestion",
    "CortexAnalystTool",
    "build_agent_config",
    "build_test_questions",
    "questions_table_ddl"
]
