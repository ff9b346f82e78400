"""
WiFiAnalytics - Intelligence Agent Configuration

Configuration for the conversational analytics agent bound to the semantic
view, plus the categorised question set used to exercise it. The agent itself
runs inside the platform; this module only produces its configuration.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wifi_analytics.semantic.semantic_view import SemanticView
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


AGENT_NAME = "WIFI_NETWORK_ANALYTICS_ASSISTANT"
QUESTIONS_TABLE = "AGENT_TEST_QUESTIONS"

ORCHESTRATION_INSTRUCTIONS = """\
You are a comprehensive WiFi Network Analytics Assistant serving multiple business roles. \
Adapt your response style based on the question context:

STRATEGIC EXECUTIVE MODE (for ROI, investment, roadmap questions):
- Focus on business impact and strategic implications
- Provide ROI calculations and cost-benefit analysis
- Reference industry benchmarks and best practices
- Present executive-friendly recommendations with clear action items

OPERATIONAL MANAGEMENT MODE (for troubleshooting, performance, incident questions):
- Provide immediate, actionable technical recommendations
- Focus on operational metrics and specific performance indicators
- Identify specific access points, networks, or time periods requiring attention
- Include technical details and diagnostic steps

CUSTOMER SUCCESS MODE (for SLA, satisfaction, service quality questions):
- Focus on customer impact and business relationship outcomes
- Provide industry-specific insights and comparisons
- Identify at-risk customers and proactive intervention opportunities
- Balance technical details with business relationship considerations

TECHNICAL ANALYTICS MODE (for statistics, correlations, prediction questions):
- Provide detailed statistical analysis with confidence intervals
- Include correlation analysis and trend identification
- Reference specific technical metrics and performance thresholds
- Focus on technical accuracy and analytical rigor

Always consider industry context (Corporate, Retail, Healthcare, Education, etc.) when providing insights."""

RESPONSE_INSTRUCTIONS = """\
- Always provide specific data-driven insights with numbers and percentages
- Reference actual customer names, manufacturers, and performance metrics from the data
- Create visualizations when possible to support your analysis
- Provide both time-series technical insights AND customer/business insights
- Correlate signal strength with throughput, latency, and packet loss metrics
- Correlate performance issues with signal strength, hardware, firmware, or environmental factors
- Suggest actionable recommendations appropriate to the question context
- Consider business impact and urgency when prioritizing network issues
- Include relevant timeframes and trend analysis when applicable"""


@dataclass
class AgentQuestion:
    """One natural-language test question."""
    question_id: int
    category: str
    question: str
    expected_insight: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "question_id": self.question_id,
            "category": self.category,
            "question": self.question,
            "expected_insight": self.expected_insight
        }

    def to_row(self) -> tuple:
        return (self.question_id, self.category, self.question, self.expected_insight)


# Category -> questions
TEST_QUESTIONS: Dict[str, List[str]] = {
    "Strategic Executive": [
        "What is our overall WiFi infrastructure ROI and which technology investments should we prioritize based on signal strength performance?",
        "Compare total cost of ownership and coverage quality between Cisco, Aruba, and Ubiquiti deployments",
        "Which industry verticals have the best signal coverage and represent growth opportunities?",
        "What's the strategic risk assessment for coverage gaps and signal quality across our customer base?",
        "Analyze the business case for upgrading customers from Wi-Fi 6 to Wi-Fi 6E based on signal strength improvements",
    ],
    "Operational Management": [
        "Which access points have poor signal strength and require immediate attention?",
        "Show me areas with signal strength below -75 dBm that need coverage improvements",
        "What are the root causes of poor signal quality and how can we optimize coverage?",
        "Which networks have interference issues affecting signal strength and throughput?",
        "Identify firmware versions causing stability issues and provide upgrade recommendations",
    ],
    "Customer Success": [
        "Which customers are at risk of SLA violations and need proactive outreach?",
        "Which customers are experiencing poor WiFi coverage and need proactive outreach?",
        "Compare signal strength and coverage quality across different industry types",
        "Which customer locations have coverage gaps that require infrastructure improvements?",
        "Analyze how signal quality correlates with customer experience across industries",
    ],
    "Technical Analytics": [
        "Perform statistical analysis of the correlation between signal strength and throughput performance",
        "Perform statistical analysis of the correlation between client density and performance degradation",
        "Analyze RSSI trends and identify optimal access point placement strategies",
        "Which hardware configurations provide the best signal coverage and quality?",
        "Provide detailed analysis of signal strength variance and coverage consistency",
    ],
    "Signal Strength & Coverage": [
        "Which buildings or zones have the weakest WiFi signal and need attention?",
        "How does signal strength vary throughout the day and what causes interference?",
        "Identify dead zones and areas where signal strength is below acceptable thresholds",
    ],
    "QoS & Performance": [
        "How does poor signal strength impact throughput and latency across different manufacturers?",
        "Which access points have packet loss issues correlated with weak signal strength?",
        "What are the signal quality trends during peak usage hours?",
    ],
    "Cross-Functional Business": [
        "Which coverage and signal quality issues should we prioritize based on customer impact and business value?",
        "How do signal strength problems correlate with customer industry types and usage patterns?",
    ],
}

EXPECTED_INSIGHTS = {
    "Strategic Executive": "Executive-level analysis with investment recommendations",
    "Operational Management": "Specific access points or networks with tactical recommendations",
    "Customer Success": "Customer-specific SLA and coverage analysis with outreach priorities",
    "Technical Analytics": "Correlation and trend analysis with technical thresholds",
    "Signal Strength & Coverage": "Coverage gaps by location with RSSI figures",
    "QoS & Performance": "Throughput, latency and packet loss compared by signal strength",
    "Cross-Functional Business": "Prioritised issues combining customer impact and business value",
}


def build_test_questions() -> List[AgentQuestion]:
    """Flatten TEST_QUESTIONS into numbered AgentQuestion rows."""
    questions = []
    for category, texts in TEST_QUESTIONS.items():
        for text in texts:
            questions.append(AgentQuestion(
                question_id=len(questions) + 1,
                category=category,
                question=text,
                expected_insight=EXPECTED_INSIGHTS.get(category)
            ))
    return questions


@dataclass
class CortexAnalystTool:
    """Analyst tool binding the agent to a semantic view."""
    name: str
    semantic_view: str
    description: str

    def to_dict(self) -> dict:
        return {
            "type": "cortex_analyst",
            "name": self.name,
            "semantic_view": self.semantic_view,
            "description": self.description
        }


@dataclass
class AgentConfig:
    """
    Full agent configuration (about, tools, orchestration, access).

    Attributes:
        name: Agent object name
        description: Shown in the agent picker
        example_questions: Starter prompts
        tools: Analyst tools
        orchestration_instructions: Persona and mode selection
        response_instructions: Answer style guidance
        access_roles: Roles allowed to use the agent
    """
    name: str
    description: str
    example_questions: List[str]
    tools: List[CortexAnalystTool]
    orchestration_instructions: str
    response_instructions: str
    access_roles: List[str]
    test_questions: List[AgentQuestion] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "example_questions": self.example_questions,
            "tools": [tool.to_dict() for tool in self.tools],
            "orchestration": {
                "instructions": self.orchestration_instructions,
                "response_instructions": self.response_instructions
            },
            "access_roles": self.access_roles,
            "test_questions": [question.to_dict() for question in self.test_questions]
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def questions_by_category(self) -> Dict[str, List[AgentQuestion]]:
        grouped: Dict[str, List[AgentQuestion]] = {}
        for question in self.test_questions:
            grouped.setdefault(question.category, []).append(question)
        return grouped


def build_agent_config(
    semantic_view: SemanticView,
    environment: Optional[EnvironmentConfig] = None
) -> AgentConfig:
    """
    Build the agent configuration bound to a semantic view.

    Args:
        semantic_view: View the analyst tool queries
        environment: Object names (defaults when None)

    Returns:
        AgentConfig
    """
    env = environment or EnvironmentConfig()

    config = AgentConfig(
        name=AGENT_NAME,
        description=(
            "Comprehensive WiFi network analytics agent providing strategic, operational, "
            "customer-focused, and technical insights for enterprise WiFi infrastructure "
            "management. Adapts response style based on question context to serve multiple "
            "business roles."
        ),
        example_questions=[
            "Which customers are at risk of SLA violations and need proactive outreach?",
            "What is our overall WiFi infrastructure ROI and which technology investments should we prioritize?",
            "Which access points require immediate attention due to performance issues?",
            "Perform statistical analysis of the correlation between client density and performance degradation",
        ],
        tools=[
            CortexAnalystTool(
                name="WIFI_ANALYTICS",
                semantic_view=f"{env.database}.{semantic_view.qualified_name}",
                description=(
                    "Comprehensive WiFi analytics including signal strength (RSSI), coverage "
                    "analysis, QoS metrics, customer networks, access points, and operational "
                    "performance data"
                )
            )
        ],
        orchestration_instructions=ORCHESTRATION_INSTRUCTIONS,
        response_instructions=RESPONSE_INSTRUCTIONS,
        access_roles=[env.analyst_role],
        test_questions=build_test_questions()
    )
    logger.debug(f"Agent {config.name}: {len(config.test_questions)} test questions")
    return config


def questions_table_ddl(environment: Optional[EnvironmentConfig] = None) -> str:
    """DDL for the agent test question table."""
    env = environment or EnvironmentConfig()
    return f"""
    CREATE OR REPLACE TABLE {env.analytics_schema}.{QUESTIONS_TABLE} (
        QUESTION_ID INTEGER NOT NULL,
        CATEGORY VARCHAR(100) NOT NULL,
        QUESTION VARCHAR(1000) NOT NULL,
        EXPECTED_INSIGHT VARCHAR(1000),
        PRIMARY KEY (QUESTION_ID)
    )
    """
