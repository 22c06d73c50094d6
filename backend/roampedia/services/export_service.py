"""Export service — PDF travel and admin reports."""

import io
import logging
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.models.experience import UserExperience
from roampedia.models.travel_list import Visited, WishlistItem
from roampedia.models.user import User
from roampedia.services.stats_service import (
    average_rating,
    region_breakdown,
    stats_service,
    theme_counts,
)

logger = logging.getLogger(__name__)

HEADER_BG = colors.HexColor("#0F766E")


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else "N/A"


def _table(rows: list[list], col_widths: list[float]) -> Table:
    table = Table(rows, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
    ]))
    return table


class _Report:
    """Collects flowables for one document and renders them to PDF bytes."""

    def __init__(self, title: str, *subtitles: str):
        self.styles = getSampleStyleSheet()
        self.body = ParagraphStyle("Body", parent=self.styles["Normal"], alignment=TA_JUSTIFY)
        self.elements = [Paragraph(escape(title), self.styles["Title"])]
        for line in subtitles:
            self.elements.append(Paragraph(escape(line), self.styles["Normal"]))
        self.elements.append(Spacer(1, 18))

    def heading(self, text: str) -> None:
        self.elements.append(Paragraph(escape(text), self.styles["Heading2"]))

    def line(self, text: str) -> None:
        self.elements.append(Paragraph(escape(text), self.styles["Normal"]))

    def paragraph(self, text: str) -> None:
        self.elements.append(Paragraph(escape(text).replace("\n", "<br/>"), self.body))

    def table(self, rows: list[list], col_widths: list[float]) -> None:
        self.elements.append(_table(rows, col_widths))

    def space(self, height: int = 12) -> None:
        self.elements.append(Spacer(1, height))

    def page_break(self) -> None:
        self.elements.append(PageBreak())

    def build(self) -> bytes:
        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, topMargin=0.5 * inch)
        doc.build(self.elements)
        return buf.getvalue()


# ─── Renderers (plain data in, PDF bytes out) ───


def render_travel_summary(email: str, visited: list[dict], wishlist: list[dict], ratings: list[int]) -> bytes:
    report = _Report("Travel Summary Report", f"Generated for: {email}", f"Date: {date.today().isoformat()}")
    report.heading("Overview")
    report.line(f"Total Countries Visited: {len(visited)}")
    report.line(f"Countries on Wishlist: {len(wishlist)}")
    report.line(f"Total Experiences: {len(ratings)}")
    if ratings:
        report.line(f"Average Rating: {average_rating(ratings):.2f}/10")
    report.space()

    if visited:
        report.heading("Visited Countries")
        rows = [["#", "Country", "Region", "Visited"]]
        for i, v in enumerate(visited, 1):
            rows.append([i, v.get("country_name") or v.get("country_code"), v.get("region") or "Unknown",
                         _fmt_date(v.get("date_visited"))])
        report.table(rows, [0.4 * inch, 2.8 * inch, 1.6 * inch, 1.4 * inch])
        report.space()

    if wishlist:
        report.heading("Wishlist")
        rows = [["#", "Country", "Region"]]
        for i, w in enumerate(wishlist, 1):
            rows.append([i, w.get("country_name") or w.get("country_code"), w.get("region") or "Unknown"])
        report.table(rows, [0.4 * inch, 3.4 * inch, 2.4 * inch])

    return report.build()


def render_experience_journal(author: str, experiences: list[dict]) -> bytes:
    """One page per experience, newest trip first."""
    report = _Report("Travel Experience Journal", author, f"Date: {date.today().isoformat()}")
    if not experiences:
        report.line("No experiences recorded yet.")
    for i, exp in enumerate(experiences):
        if i > 0:
            report.page_break()
        report.heading(exp["country"])
        report.line(f"Rating: {exp['rating']}/10")
        report.line(f"Themes: {', '.join(exp.get('themes') or [])}")
        report.line(f"Duration: {_fmt_date(exp.get('from_date'))} to {_fmt_date(exp.get('to_date'))}")
        report.space()
        report.paragraph(exp.get("experience") or "")
    return report.build()


def render_statistics(regions: dict[str, int], themes: dict[str, int]) -> bytes:
    report = _Report("Travel Statistics Report", f"Date: {date.today().isoformat()}")
    report.heading("Countries by Region")
    if regions:
        for region, count in regions.items():
            report.line(f"{region}: {count} countries")
    else:
        report.line("No visited countries yet.")
    report.space()

    if themes:
        report.heading("Travel Theme Preferences")
        for theme, count in sorted(themes.items(), key=lambda kv: kv[1], reverse=True):
            report.line(f"{theme}: {count} experiences")
    return report.build()


def render_users_summary(users: list[dict]) -> bytes:
    report = _Report(
        "All Users Summary Report", f"Total Users: {len(users)}", f"Generated: {date.today().isoformat()}"
    )
    rows = [["Email", "Joined", "Visited", "Wishlist", "Experiences"]]
    for u in users:
        rows.append([u["email"], _fmt_date(u.get("created_at")), u["visited"], u["wishlist"], u["experiences"]])
    report.table(rows, [2.8 * inch, 1.1 * inch, 0.8 * inch, 0.8 * inch, 1.0 * inch])
    return report.build()


def render_country_popularity(countries: list[dict]) -> bytes:
    report = _Report("Country Popularity Report", f"Generated: {date.today().isoformat()}")
    report.heading("Most Visited Countries")
    rows = [["#", "Country", "Visits"]]
    for i, c in enumerate(countries, 1):
        rows.append([i, c.get("country_name") or c.get("country_code"), c["count"]])
    report.table(rows, [0.4 * inch, 4.0 * inch, 1.0 * inch])
    return report.build()


def render_engagement(rows: list[dict]) -> bytes:
    report = _Report("User Engagement Report", f"Generated: {date.today().isoformat()}")
    data = [["#", "Email", "Total", "Visited", "Wishlist", "Experiences"]]
    for i, r in enumerate(rows, 1):
        data.append([i, r["email"], r["total"], r["visited"], r["wishlist"], r["experiences"]])
    report.table(data, [0.4 * inch, 2.8 * inch, 0.7 * inch, 0.7 * inch, 0.7 * inch, 0.9 * inch])
    return report.build()


def render_system_statistics(totals: dict) -> bytes:
    report = _Report("System Statistics Report", f"Generated: {date.today().isoformat()}")
    users = totals["users"]
    report.line(f"Total Active Users: {users}")
    report.line(f"Total Visited Countries: {totals['visited']}")
    report.line(f"Total Wishlisted Countries: {totals['wishlist']}")
    report.line(f"Total Experiences Shared: {totals['experiences']}")
    report.line(f"Average Visited per User: {totals['visited'] / users if users else 0:.2f}")
    report.line(f"Average Experiences per User: {totals['experiences'] / users if users else 0:.2f}")
    return report.build()


class ExportService:
    """Loads report data and renders it as PDF."""

    async def _visited(self, db: AsyncSession, user: User) -> list[Visited]:
        result = await db.execute(
            select(Visited).where(Visited.user_id == user.id).order_by(Visited.date_visited.desc())
        )
        return list(result.scalars().all())

    async def _experiences(self, db: AsyncSession, user: User, order_by) -> list[UserExperience]:
        result = await db.execute(
            select(UserExperience).where(UserExperience.user_id == user.id).order_by(order_by)
        )
        return list(result.scalars().all())

    async def travel_summary_pdf(self, db: AsyncSession, user: User) -> bytes:
        visited = await self._visited(db, user)
        wishlist = (await db.execute(
            select(WishlistItem).where(WishlistItem.user_id == user.id).order_by(WishlistItem.added_at.desc())
        )).scalars().all()
        experiences = await self._experiences(db, user, UserExperience.created_at.desc())
        return render_travel_summary(
            user.email,
            [{"country_name": v.country_name, "country_code": v.country_code, "region": v.region,
              "date_visited": v.date_visited} for v in visited],
            [{"country_name": w.country_name, "country_code": w.country_code, "region": w.region}
             for w in wishlist],
            [e.rating for e in experiences],
        )

    async def experience_journal_pdf(self, db: AsyncSession, user: User) -> bytes:
        experiences = await self._experiences(db, user, UserExperience.from_date.desc())
        return render_experience_journal(
            user.full_name,
            [{"country": e.country, "rating": e.rating, "themes": list(e.themes or []),
              "from_date": e.from_date, "to_date": e.to_date, "experience": e.experience}
             for e in experiences],
        )

    async def statistics_pdf(self, db: AsyncSession, user: User) -> bytes:
        visited = await self._visited(db, user)
        experiences = await self._experiences(db, user, UserExperience.created_at.desc())
        return render_statistics(
            region_breakdown(v.region for v in visited),
            theme_counts(e.themes for e in experiences),
        )

    async def users_summary_pdf(self, db: AsyncSession) -> bytes:
        rows = await stats_service.engagement_rows(db)
        users = (await db.execute(
            select(User).where(User.is_active.is_(True)).order_by(User.created_at.desc())
        )).scalars().all()
        counts = {r["user_id"]: r for r in rows}
        return render_users_summary([
            {
                "email": u.email,
                "created_at": u.created_at,
                "visited": counts[str(u.id)]["visited"],
                "wishlist": counts[str(u.id)]["wishlist"],
                "experiences": counts[str(u.id)]["experiences"],
            }
            for u in users if str(u.id) in counts
        ])

    async def country_popularity_pdf(self, db: AsyncSession) -> bytes:
        popular = await stats_service.popular_countries(db, limit=50)
        return render_country_popularity(popular["most_visited"])

    async def engagement_pdf(self, db: AsyncSession) -> bytes:
        rows = [
            {**r, "total": r["visited"] + r["wishlist"] + r["experiences"]}
            for r in await stats_service.engagement_rows(db)
        ]
        rows.sort(key=lambda r: r["total"], reverse=True)
        return render_engagement(rows)

    async def system_statistics_pdf(self, db: AsyncSession) -> bytes:
        totals = {
            "users": (await db.execute(
                select(func.count(User.id)).where(User.is_active.is_(True))
            )).scalar() or 0,
        }
        for key, model in (("visited", Visited), ("wishlist", WishlistItem), ("experiences", UserExperience)):
            totals[key] = (await db.execute(select(func.count(model.id)))).scalar() or 0
        logger.info(f"System statistics report: {totals}")
        return render_system_statistics(totals)


export_service = ExportService()
