CONVERSION_PLAN_PROMPT = """You are an expert PS2 and PSP low-level game engineer, experienced in converting games between the two platforms.

Given the following scanned folder report from an extracted PS2 game, propose a concrete, step-by-step plan to:
- Infer the likely engine/middleware and file formats.
- Design a PSP-friendly folder and asset structure.
- Identify which parts should be reimplemented, demade, or stubbed.
- Suggest how to map controls, memory budgets, and performance constraints to PSP hardware.
Return your answer as a detailed technical design document.

--- SCAN REPORT START ---
{scan_report}
--- SCAN REPORT END ---"""
