from __future__ import annotations

from datetime import date

import altair as alt
import streamlit as st

from travel_stats.aggregate import (
    PeriodSpec,
    aggregate,
    merge_small_entries,
    results_to_csv_text,
    total_days,
)
from travel_stats.dateutils import format_days, iso_one_year_ago, iso_today, num_to_iso_date_str, today_utc
from travel_stats.errors import FormatError, StateError, UnsupportedOptionError
from travel_stats.models import AggregatedResult, TravelRecord
from travel_stats.records_io import parse, summarize_records

SAMPLE_DATA = """20190219\t20190222\t日本\t\t\t
20190222\t20190225\t阿联酋\t\t\t
20190225\t20190305\t申根区域\t瑞士\t20190225\t20190228
\t\t\t法国\t20190228\t20190303
\t\t\t摩纳哥\t20190303\t20190305
20190305\t20190315\t英国\t英格兰\t\t
20190315\t20190325\t美国\t纽约州\t20190315\t20190320
\t\t\t佛罗里达州\t20190320\t20190325
20190325\t20190401\t开曼群岛\t\t\t
20190402\t20190410\t日本\t\t\t
20190410\t20190420\t中国\t\t\t
20190420\t20190501\t新加坡\t\t\t
20190605\t20190615\t申根区域\t德国\t20190605\t20190609
\t\t\t奥地利\t20190609\t20190615
20190615\t20190630\t英国\t英格兰\t20190615\t20190622
\t\t\t苏格兰\t20190622\t20190623
\t\t\t英格兰\t20190623\t20190630
20190821\t20190901\t日本\t\t\t"""

PERIOD_LABELS = {
    "all": "全部记录",
    "2years": "最近 2 年",
    "1year": "最近 1 年",
    "180": "最近 180 天",
    "custom": "自定义范围",
}
METHOD_LABELS = {
    "full": "入境日和出境日都算一整天",
    "half": "入境日和出境日各算半天",
    "entry": "入境日算一整天，出境日不算",
    "exit": "出境日算一整天，入境日不算",
}
BREAKDOWN_LABELS = {"region": "按大区域", "details": "按细分地区"}
DISPLAY_LABELS = {"table": "表格", "pie": "饼图"}
PIE_LABELS = {"percentage": "显示占比", "days": "显示天数"}


@st.cache_data(show_spinner=False)
def _parse(text: str) -> list[TravelRecord]:
    return parse(text)


def _table_rows(results: list[AggregatedResult]) -> list[dict[str, object]]:
    return [
        {"地点": r.name, "总天数": format_days(r.days), "占比": f"{r.percentage:.1f}%"}
        for r in results
    ]


def pie_rows(results: list[AggregatedResult], label: str = "percentage") -> list[dict[str, object]]:
    """Rows for the pie chart; ``label`` is "percentage" or "days"."""

    rows: list[dict[str, object]] = []
    for r in results:
        text = f"{r.name}: {r.percentage:.1f}%" if label == "percentage" else f"{r.name}: {format_days(r.days)} 天"
        rows.append({"name": r.name, "days": r.days, "percentage": round(r.percentage, 1), "label": text})
    return rows


def pie_chart(results: list[AggregatedResult], label: str = "percentage") -> alt.LayerChart:
    base = alt.Chart(alt.Data(values=pie_rows(results, label))).encode(
        theta=alt.Theta("days:Q", stack=True),
        color=alt.Color("name:N", sort=None, legend=None),
    )
    arcs = base.mark_arc(outerRadius=120)
    texts = base.mark_text(radius=150).encode(text="label:N")
    return arcs + texts


def main() -> None:
    st.set_page_config(page_title="旅行记录统计", layout="wide")
    st.title("旅行记录统计：各地停留天数")

    with st.sidebar:
        st.subheader("统计周期")
        period_kind = st.radio(
            "周期", list(PERIOD_LABELS), format_func=PERIOD_LABELS.__getitem__, label_visibility="collapsed"
        )
        today = today_utc()
        custom_from = ""
        custom_to = ""
        if period_kind == "custom":
            c1, c2 = st.columns(2)
            custom_from = c1.date_input("开始日期", value=date.fromisoformat(iso_one_year_ago(today))).isoformat()
            custom_to = c2.date_input("结束日期", value=date.fromisoformat(iso_today(today))).isoformat()

        st.subheader("计数方式")
        method = st.radio(
            "计数方式", list(METHOD_LABELS), format_func=METHOD_LABELS.__getitem__, label_visibility="collapsed"
        )

        st.subheader("显示")
        breakdown = st.radio(
            "地点细分", list(BREAKDOWN_LABELS), format_func=BREAKDOWN_LABELS.__getitem__, horizontal=True
        )
        display = st.radio(
            "显示格式", list(DISPLAY_LABELS), format_func=DISPLAY_LABELS.__getitem__, horizontal=True
        )
        pie_label = "percentage"
        if display == "pie":
            pie_label = st.radio("饼图标签", list(PIE_LABELS), format_func=PIE_LABELS.__getitem__, horizontal=True)
        merge_small = st.checkbox("将占比小于 2% 的地点合并为“其他”", value=False)

    text = st.text_area(
        "旅行记录（Tab 分隔：入境日 出境日 地区 细分地区 细分入境日 细分出境日）",
        value=SAMPLE_DATA,
        height=280,
    )

    try:
        records = _parse(text)
        results = aggregate(
            records,
            breakdown=breakdown,
            counting_method=method,
            period=PeriodSpec(kind=period_kind, custom_from=custom_from, custom_to=custom_to),
            today=today,
        )
    except (FormatError, StateError, UnsupportedOptionError) as exc:
        st.error(f"错误：{exc}")
        records, results = [], []

    if not results:
        st.info("导入旅行记录后即可开始统计")
        return

    summary = summarize_records(records)
    c1, c2, c3 = st.columns(3)
    c1.metric("总天数", format_days(total_days(results)))
    c2.metric("行程数", str(summary.records))
    if summary.min_day is not None and summary.max_day is not None:
        c3.metric("记录范围", f"{num_to_iso_date_str(summary.min_day)} ~ {num_to_iso_date_str(summary.max_day)}")

    shown = merge_small_entries(results, other_name="其他") if merge_small else results
    st.subheader("明细（按天数排序）")
    if display == "pie":
        st.altair_chart(pie_chart(shown, pie_label), use_container_width=True)
    else:
        st.dataframe(_table_rows(shown), use_container_width=True, hide_index=True)

    st.download_button(
        "下载 CSV",
        data=results_to_csv_text(shown),
        file_name="travel_stats.csv",
        mime="text/csv",
    )
    st.caption("说明：相邻行程共享的边界日只计一次；细分地区的区间若重叠，重叠的中间天数会重复计算。")


if __name__ == "__main__":
    main()
