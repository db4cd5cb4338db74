"""Prompt templates for the heuristic order checker.

The prompt is written in Chinese because the free-text fallback parser in
``liqpass.verification.heuristic`` matches Chinese verdict keywords.
"""

# ---------------------------------------------------------------------------
# Order plausibility assessment
# ---------------------------------------------------------------------------

ORDER_ASSESSMENT_PROMPT = """\
请作为金融订单验证专家，分析以下订单信息：
交易所：{exchange}
交易对：{pair}
订单参考号：{order_ref}

请执行以下分析：
1. 检查订单格式是否符合标准规范
2. 评估订单参考号的合理性
3. 分析交易对的合法性
4. 判断订单是否存在潜在风险

请用JSON格式回复，包含以下字段：
- valid: 布尔值，表示订单是否有效
- confidence: 0-100的数值，表示验证置信度
- details: 验证结果的详细说明
- riskLevel: 风险等级（low/medium/high）"""


def build_order_assessment_prompt(exchange: str, pair: str, order_ref: str) -> str:
    return ORDER_ASSESSMENT_PROMPT.format(exchange=exchange, pair=pair, order_ref=order_ref)
