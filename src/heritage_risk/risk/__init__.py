"""Risk scoring and temporal trend analysis for heritage sites."""

from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.comparative import (
    ComparativeAnalyzer,
    ComparativeAnalyzerConfig,
    ComparativeTrendAnalysis,
    SiteCorrelation,
    SiteTrend,
    TimeRange,
    align_series,
    create_comparative_analyzer,
    pearson_correlation,
)
from heritage_risk.risk.formatting import format_priority_label, format_threat_label
from heritage_risk.risk.risk_aggregator import (
    AggregatorConfig,
    MAGNITUDE_ACTIONS,
    ROUTINE_MONITORING,
    SiteRiskAggregator,
    SiteRiskProfile,
    THREAT_RECOMMENDATIONS,
    URGENCY_PREFIXES,
    create_site_risk_aggregator,
)
from heritage_risk.risk.risk_scorer import (
    COMPONENT_DESCRIPTIONS,
    PRIORITY_DESCRIPTIONS,
    PRIORITY_THRESHOLDS,
    RiskCalculation,
    RiskScorer,
    SingleStepPolicy,
    UNCERTAINTY_MATRIX,
    UncertaintyMatrixPolicy,
    UncertaintyPolicy,
    UncertaintyPolicyName,
    create_risk_scorer,
    get_uncertainty_policy,
)
from heritage_risk.risk.threat_evolution import (
    CriticalPeriod,
    EvolutionPattern,
    ThreatEvolution,
    ThreatEvolutionAnalyzer,
    ThreatEvolutionConfig,
    TimelineEntry,
    create_threat_evolution_analyzer,
)
from heritage_risk.risk.time_series import (
    SeriesMetric,
    SiteNameResolver,
    TimeSeriesBuilder,
    TimeSeriesPoint,
    create_time_series_builder,
    resolve_site_name,
)
from heritage_risk.risk.trends import (
    TrendAnalysis,
    TrendAnalyzer,
    TrendAnalyzerConfig,
    TrendDirection,
    create_trend_analyzer,
)
from heritage_risk.risk.types import Priority, ThreatType, UncertaintyLevel

__all__ = [
    # Types
    "Priority",
    "ThreatType",
    "UncertaintyLevel",
    "RiskAssessment",
    # Risk Scorer
    "RiskScorer",
    "create_risk_scorer",
    "RiskCalculation",
    "UncertaintyPolicy",
    "UncertaintyPolicyName",
    "SingleStepPolicy",
    "UncertaintyMatrixPolicy",
    "get_uncertainty_policy",
    "PRIORITY_THRESHOLDS",
    "PRIORITY_DESCRIPTIONS",
    "COMPONENT_DESCRIPTIONS",
    "UNCERTAINTY_MATRIX",
    # Site Risk Aggregator
    "SiteRiskAggregator",
    "create_site_risk_aggregator",
    "AggregatorConfig",
    "SiteRiskProfile",
    "THREAT_RECOMMENDATIONS",
    "URGENCY_PREFIXES",
    "MAGNITUDE_ACTIONS",
    "ROUTINE_MONITORING",
    # Time Series
    "TimeSeriesBuilder",
    "create_time_series_builder",
    "TimeSeriesPoint",
    "SeriesMetric",
    "SiteNameResolver",
    "resolve_site_name",
    # Trends
    "TrendAnalyzer",
    "create_trend_analyzer",
    "TrendAnalyzerConfig",
    "TrendAnalysis",
    "TrendDirection",
    # Comparative
    "ComparativeAnalyzer",
    "create_comparative_analyzer",
    "ComparativeAnalyzerConfig",
    "ComparativeTrendAnalysis",
    "SiteTrend",
    "SiteCorrelation",
    "TimeRange",
    "align_series",
    "pearson_correlation",
    # Threat Evolution
    "ThreatEvolutionAnalyzer",
    "create_threat_evolution_analyzer",
    "ThreatEvolutionConfig",
    "ThreatEvolution",
    "TimelineEntry",
    "CriticalPeriod",
    "EvolutionPattern",
    # Formatting
    "format_threat_label",
    "format_priority_label",
]
