"""Trade journal analytics: metrics over a filtered trade collection.

Key components
--------------
calculate_pnl / calculate_r_multiple   Per-trade net P&L and R-multiple
calculate_trade_risk_metrics           Planned vs. actual risk for one trade
calculate_profit_factor, ...           Aggregate ratios over closed trades
calculate_day_stats, calculate_avg_r   Day aggregates, planned vs. realized R
calculate_streaks                      Trade and day win/loss streaks
calculate_zella_score                  Weighted composite performance score
build_chart_data                       Daily cumulative P&L and drawdown
compute_dashboard_stats                Everything above in one bundle
"""

from .equity_curve import ChartBounds, ChartPoint, build_chart_data, chart_bounds
from .metrics import (
    DayStats,
    HoldTimes,
    RAverages,
    TradeRiskMetrics,
    calculate_adjusted_win_rate,
    calculate_avg_hold_times,
    calculate_avg_r,
    calculate_avg_trade_pnl,
    calculate_avg_win_loss,
    calculate_day_stats,
    calculate_expectancy,
    calculate_gross_stats,
    calculate_max_drawdown,
    calculate_net_mae,
    calculate_net_mfe,
    calculate_planned_r,
    calculate_pnl,
    calculate_profit_factor,
    calculate_r_multiple,
    calculate_recovery_factor,
    calculate_total_commissions,
    calculate_trade_risk_metrics,
    calculate_win_rate,
    table_multiplier,
)
from .score import ScoreDetail, ZellaScore, calculate_zella_score
from .streaks import StreakStats, calculate_streaks
from .summary import DashboardStats, compute_dashboard_stats

__all__ = [
    "ChartBounds",
    "ChartPoint",
    "build_chart_data",
    "chart_bounds",
    "DayStats",
    "HoldTimes",
    "RAverages",
    "TradeRiskMetrics",
    "calculate_adjusted_win_rate",
    "calculate_avg_hold_times",
    "calculate_avg_r",
    "calculate_avg_trade_pnl",
    "calculate_avg_win_loss",
    "calculate_day_stats",
    "calculate_expectancy",
    "calculate_gross_stats",
    "calculate_max_drawdown",
    "calculate_net_mae",
    "calculate_net_mfe",
    "calculate_planned_r",
    "calculate_pnl",
    "calculate_profit_factor",
    "calculate_r_multiple",
    "calculate_recovery_factor",
    "calculate_total_commissions",
    "calculate_trade_risk_metrics",
    "calculate_win_rate",
    "table_multiplier",
    "ScoreDetail",
    "ZellaScore",
    "calculate_zella_score",
    "StreakStats",
    "calculate_streaks",
    "DashboardStats",
    "compute_dashboard_stats",
]
