"""Streamlit UI for JobFlow."""
from __future__ import annotations

import sys
import time
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobflow.ai import AIService
from jobflow.autopilot import AutoPilot
from jobflow.config import AI_MODE_STRICT, ensure_dirs, get_api_key, load_settings
from jobflow.discovery import discover
from jobflow.errors import JobFlowError, MissingCredentialsError
from jobflow.log import get_logger
from jobflow.models import (
    EXPERIENCE_LEVELS,
    PIPELINE_STATUSES,
    STATUS_ANALYZING,
    STATUS_APPLIED,
    STATUS_FAILED,
    STATUS_NEW,
    STATUS_SKIPPED,
    UserProfile,
)
from jobflow.pipeline import COLUMN_LABELS, columns, move_job
from jobflow.profile import merge_parsed_resume, read_profile, write_profile
from jobflow.report import build_summary, jobs_to_csv
from jobflow.resume_parser import COMMON_SKILLS
from jobflow.state import AppState
from jobflow.store import StateStore

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

JOB_TYPES: list[str] = ["Full-time", "Part-time", "Contract", "Freelance"]
WORK_STYLES: list[str] = ["Remote", "Hybrid", "On-site"]
REGIONS: list[str] = [
    "United States", "Canada", "United Kingdom", "Germany", "Netherlands",
    "India", "Australia", "Singapore", "Europe (Remote)", "Worldwide (Remote)",
]
_STATUS_ICON = {
    STATUS_NEW: "🆕", STATUS_ANALYZING: "⏳", STATUS_APPLIED: "✅",
    STATUS_SKIPPED: "⏭️", STATUS_FAILED: "⚠️",
    "interviewing": "🗣️", "offer": "🎉", "rejected": "❌",
}
_LOG_COLOR = {"error": "red", "success": "green", "info": "blue", "action": "gray"}

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #0f172a 0%, #111827 60%, #1e1b4b 100%);
}
[data-testid="stMetric"] {
    background: rgba(30,41,59,0.6);
    padding: 0.75rem 1rem;
    border-radius: 12px;
    border: 1px solid rgba(148,163,184,0.2);
}
</style>
"""

# ── Session ──────────────────────────────────────────────────────────────


def _notify(message: str) -> None:
    st.toast(message, icon="✅")


def _init_session() -> None:
    if "state" in st.session_state:
        return
    ensure_dirs()
    settings = load_settings()
    store = StateStore(max_logs=int(settings["storage"]["max_logs"]))
    state = store.load()
    try:
        ai = AIService(settings)
    except MissingCredentialsError as exc:
        st.error(str(exc))
        st.stop()
    st.session_state["settings"] = settings
    st.session_state["store"] = store
    st.session_state["state"] = state
    st.session_state["ai"] = ai
    st.session_state["autopilot"] = AutoPilot.from_settings(
        state, ai, settings, persist=store.save, on_complete=_notify,
    )


def _state() -> AppState:
    return st.session_state["state"]


def _ai() -> AIService:
    return st.session_state["ai"]


def _autopilot() -> AutoPilot:
    return st.session_state["autopilot"]


def _save() -> None:
    st.session_state["store"].save(_state())


def _job_label(job) -> str:
    return f"{job.company} — {job.title}"


# ── Page: Dashboard ──────────────────────────────────────────────────────


def page_dashboard() -> None:
    state = _state()
    st.header(f"Welcome back, {state.profile.name or 'Candidate'}")
    st.caption("Your automated job application system is online and ready.")

    stats = state.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Jobs found", stats.total_found)
    c2.metric("Applied", stats.applied)
    c3.metric("Skipped", stats.skipped)
    c4.metric("Pending", stats.pending)

    if stats.total_found:
        st.bar_chart({"Applied": [stats.applied], "Skipped": [stats.skipped], "Pending": [stats.pending]})

    st.download_button(
        "Export CSV",
        data=jobs_to_csv(list(reversed(state.jobs))),
        file_name="jobflow_applications.csv",
        mime="text/csv",
    )

    st.subheader("Recent activity")
    if not state.jobs:
        st.info("No jobs yet — head to **Discovery** to find some.")
    for job in list(reversed(state.jobs))[:10]:
        score = f" · {job.match_score}%" if job.match_score else ""
        st.markdown(f"{_STATUS_ICON.get(job.status, '•')} **{job.title}** @ {job.company} — `{job.status}`{score}")

    if state.jobs:
        with st.expander("All jobs"):
            import pandas as pd

            df = pd.DataFrame([j.to_dict() for j in state.jobs])
            df["match_score"] = pd.to_numeric(df["match_score"], errors="coerce")
            st.dataframe(
                df[["title", "company", "location", "status", "match_score", "source", "url"]],
                use_container_width=True,
                column_config={
                    "url": st.column_config.LinkColumn("Link"),
                    "match_score": st.column_config.ProgressColumn(
                        "Match", min_value=0, max_value=100, format="%d%%",
                    ),
                },
                hide_index=True,
            )

    with st.expander("Markdown summary"):
        st.markdown(build_summary(state.jobs))


# ── Page: Profile ────────────────────────────────────────────────────────


def page_profile() -> None:
    state = _state()
    ai = _ai()
    st.header("Profile")

    st.subheader("1 — Resume")
    uploaded = st.file_uploader("Upload resume", type=["pdf", "docx", "txt"])
    if uploaded is not None and st.button("Analyze resume", type="primary"):
        with st.spinner("Analyzing your resume…"):
            try:
                parsed = ai.parse_resume(uploaded.getvalue(), uploaded.type or "application/pdf")
                roles = ai.suggest_roles(parsed.get("resume_text", ""))
            except (ValueError, JobFlowError) as exc:
                log.warning("Resume upload %s failed: %s", uploaded.name, exc)
                st.error(f"Failed to parse resume: {exc}")
            else:
                state.profile = merge_parsed_resume(state.profile, parsed, roles)
                _save()
                st.success(f"Resume parsed — {len(parsed.get('skills', []))} skills, {len(roles)} suggested roles")

    p = state.profile
    st.subheader("2 — Details")
    with st.form("profile_form"):
        c1, c2 = st.columns(2)
        with c1:
            name = st.text_input("Full name", value=p.name)
            email = st.text_input("Email", value=p.email)
            phone = st.text_input("Phone", value=p.phone)
            location = st.text_input("Home location", value=p.location)
            linkedin = st.text_input("LinkedIn URL", value=p.linkedin_url)
            portfolio = st.text_input("Portfolio URL", value=p.portfolio_url)
        with c2:
            level = st.selectbox(
                "Experience level", EXPERIENCE_LEVELS,
                index=EXPERIENCE_LEVELS.index(p.experience_level) if p.experience_level in EXPERIENCE_LEVELS else 0,
            )
            work_style = st.selectbox(
                "Work style", WORK_STYLES,
                index=WORK_STYLES.index(p.work_style) if p.work_style in WORK_STYLES else 0,
            )
            job_types = st.multiselect("Job types", JOB_TYPES, default=[t for t in p.job_types if t in JOB_TYPES])
            salary = st.text_input("Salary expectation", value=p.salary_expectation)
            notice = st.text_input("Notice period", value=p.notice_period)
            threshold = st.slider("Highlight matches above (%)", 0, 100, int(p.match_threshold))

        regions = st.multiselect(
            "Preferred regions",
            options=list(dict.fromkeys(p.preferred_regions + REGIONS)),
            default=p.preferred_regions,
        )
        skill_opts = list(dict.fromkeys(p.skills + COMMON_SKILLS))
        skills = st.multiselect("Skills", options=skill_opts, default=p.skills)
        roles_text = st.text_area("Target roles (one per line)", value="\n".join(p.target_roles), height=110)
        education = st.text_input("Education", value=p.education)
        resume_text = st.text_area("Experience summary", value=p.resume_text, height=160)
        t1, t2 = st.columns(2)
        remote_only = t1.toggle("Remote only", value=p.remote_only)
        visa = t2.toggle("Needs visa sponsorship", value=p.visa_sponsorship)
        save = st.form_submit_button("Save Profile", type="primary", use_container_width=True)

    if save:
        state.profile = UserProfile(
            name=name, email=email, phone=phone, location=location,
            experience_level=level,
            target_roles=[r.strip() for r in roles_text.splitlines() if r.strip()],
            preferred_regions=regions, job_types=job_types,
            remote_only=remote_only, work_style=work_style,
            salary_expectation=salary, match_threshold=threshold,
            visa_sponsorship=visa, notice_period=notice,
            linkedin_url=linkedin, portfolio_url=portfolio,
            education=education, resume_text=resume_text, skills=skills,
        )
        _save()
        st.success("Profile saved!")

    if st.button("✨ Suggest roles from my experience"):
        context = state.profile.resume_text or ", ".join(state.profile.skills)
        if not context:
            st.warning("Add a resume or some skills first.")
        else:
            with st.spinner("Thinking…"):
                roles = ai.suggest_roles(context)
            new_roles = [r for r in roles if r not in state.profile.target_roles]
            state.profile.target_roles.extend(new_roles)
            _save()
            st.success(f"Added {len(new_roles)} role(s): {', '.join(new_roles) or '—'}")
            st.rerun()

    st.subheader("3 — Share")
    e1, e2 = st.columns(2)
    with e1:
        if st.button("Export profile to config/profile.yaml"):
            path = write_profile(state.profile)
            st.success(f"Saved to `{path.relative_to(ROOT)}`")
    with e2:
        imported = st.file_uploader("Import profile YAML", type=["yaml", "yml"], key="profile_yaml")
        if imported is not None and st.button("Import"):
            try:
                state.profile = read_profile(imported.getvalue().decode("utf-8"))
            except ValueError as exc:
                st.error(f"Import failed: {exc}")
            else:
                _save()
                st.success("Profile imported.")


# ── Page: Discovery ──────────────────────────────────────────────────────


def page_discovery() -> None:
    state = _state()
    st.header("Discovery")
    st.caption("Search job boards (Remotive, Jobicy) and AI search, then send results to AutoPilot.")

    use_ai = st.toggle("Include AI search", value=_ai().online, disabled=not _ai().online)
    if st.button("🔍 Find jobs", type="primary"):
        with st.spinner("Searching…"):
            try:
                st.session_state["search_results"] = discover(
                    state.profile, _ai(), use_ai=use_ai,
                    settings=st.session_state["settings"],
                    limit=int(st.session_state["settings"]["sources"]["limit"]),
                )
            except ValueError as exc:
                st.warning(str(exc))

    results = st.session_state.get("search_results") or []
    if results:
        st.subheader(f"{len(results)} results")
        if st.button(f"Add all {len(results)} to AutoPilot queue"):
            added = state.add_jobs_to_queue(results)
            _save()
            st.session_state["search_results"] = []
            st.toast(f"Added {len(added)} jobs to AutoPilot")
            st.rerun()
        for job in results:
            with st.expander(f"{job.title} — {job.company} ({job.source})"):
                st.caption(job.location)
                st.write(job.description)
                if job.url and job.url != "#":
                    st.markdown(f"[Open listing]({job.url})")

    st.divider()
    st.subheader("Manual add")
    with st.form("manual_add", clear_on_submit=True):
        title = st.text_input("Job title")
        company = st.text_input("Company")
        url = st.text_input("URL (optional)")
        if st.form_submit_button("Add to queue"):
            try:
                job = state.add_manual_job(title, company, url)
            except ValueError as exc:
                st.error(str(exc))
            else:
                _save()
                st.success("Added." if job else "Already in the queue.")


# ── Page: AutoPilot ──────────────────────────────────────────────────────


def page_autopilot() -> None:
    state = _state()
    pilot = _autopilot()
    st.header("AutoPilot")

    left, right = st.columns([1, 2])
    with left:
        if not pilot.is_running:
            if st.button("▶ Start AutoPilot", type="primary", use_container_width=True):
                pilot.start()
                st.rerun()
        elif st.button("⏸ Pause", use_container_width=True):
            pilot.pause()
            st.rerun()

        stats = state.stats
        st.metric("In queue", pilot.queued_count())
        st.metric("Processed", stats.applied + stats.skipped)

        st.markdown("**System output**")
        with st.container(height=360):
            for entry in state.logs[-200:]:
                color = _LOG_COLOR.get(entry.type, "gray")
                ts = entry.timestamp.astimezone().strftime("%H:%M:%S")
                st.markdown(f"`[{ts}]` :{color}[{entry.message}]")

    with right:
        st.markdown("**Application queue**")
        if not state.jobs:
            st.info("Queue empty.")
        for job in state.jobs:
            icon = _STATUS_ICON.get(job.status, "•")
            with st.expander(f"{icon} {job.title} — {job.company} · {job.status}"):
                if job.match_score is not None and job.status != STATUS_NEW:
                    good = job.match_score >= state.profile.match_threshold
                    st.markdown(f"{':green' if good else ':orange'}[Match: {job.match_score}%] {job.application_notes or ''}")
                if job.status == STATUS_APPLIED and job.generated_cover_letter:
                    st.text_area("Cover letter", job.generated_cover_letter, height=220, key=f"cl_{job.id}")
                    if job.url and job.url != "#":
                        st.link_button("Finalize application ↗", job.url)

    if pilot.is_running:
        with st.spinner("Analyzing next job…"):
            pilot.step()
        time.sleep(pilot.tick_interval)
        st.rerun()


# ── Page: Pipeline ───────────────────────────────────────────────────────


def page_pipeline() -> None:
    state = _state()
    st.header("Pipeline")
    board = columns(state)
    cols = st.columns(len(PIPELINE_STATUSES))
    for col, status in zip(cols, PIPELINE_STATUSES):
        with col:
            st.subheader(f"{COLUMN_LABELS[status]} ({len(board[status])})")
            for job in board[status]:
                with st.container(border=True):
                    st.markdown(f"**{job.title}**  \n{job.company}")
                    target = st.selectbox(
                        "Move to", PIPELINE_STATUSES,
                        index=PIPELINE_STATUSES.index(status),
                        format_func=COLUMN_LABELS.get,
                        key=f"mv_{job.id}",
                        label_visibility="collapsed",
                    )
                    if target != status:
                        with st.spinner("Updating…"):
                            move_job(state, job.id, target, coach=_ai())
                        _save()
                        st.rerun()
                    if job.interview_prep:
                        st.caption(f"🧠 {len(job.interview_prep)} prep questions ready")
                    if st.button("Remove", key=f"rm_{job.id}"):
                        state.remove_job(job.id)
                        _save()
                        st.rerun()


# ── Page: Optimizer ──────────────────────────────────────────────────────


def page_optimizer() -> None:
    state = _state()
    st.header("Resume Optimizer")
    st.caption("Tailor your resume for a specific job to pass ATS filters.")
    jobs = [j for j in state.jobs if j.status not in (STATUS_SKIPPED, STATUS_FAILED)]
    if not jobs:
        st.info("No eligible jobs in your queue yet.")
        return
    job = st.selectbox("Select target job", jobs, format_func=_job_label)
    if st.button("Optimize", type="primary"):
        if not state.profile.resume_text:
            st.warning("Please upload a resume in Profile first.")
            return
        with st.spinner("Analyzing…"):
            result = _ai().analyze_resume_for_job(job, state.profile)
        st.metric("ATS match", f"{result.score}%")
        st.markdown("**Missing keywords:** " + (", ".join(result.missing_keywords) or "none"))
        st.markdown("**Suggested improvements**")
        for item in result.suggested_improvements:
            st.markdown(f"- {item}")
        st.markdown("**Optimized summary**")
        st.info(result.optimized_summary)


# ── Page: Interview Prep ─────────────────────────────────────────────────


def page_interview() -> None:
    state = _state()
    st.header("Interview Prep")
    jobs = [j for j in state.jobs if j.status in PIPELINE_STATUSES]
    if not jobs:
        st.info("Apply to a job first — prep is generated for jobs in your pipeline.")
        return
    job = st.selectbox("Job", jobs, format_func=_job_label)
    if st.button("Generate questions", type="primary"):
        with st.spinner("Preparing questions…"):
            job.interview_prep = _ai().generate_interview_questions(job, state.profile)
        _save()
    for i, q in enumerate(job.interview_prep or [], 1):
        with st.expander(f"Q{i}. {q.question}"):
            st.write(q.suggested_answer)
            for point in q.key_points:
                st.markdown(f"- {point}")


# ── Page: Networking ─────────────────────────────────────────────────────


def page_networking() -> None:
    state = _state()
    st.header("Networking Hub")
    with st.form("networking"):
        kind = st.radio("Format", ["linkedin", "email"], horizontal=True,
                        format_func={"linkedin": "LinkedIn note", "email": "Cold email"}.get)
        target = st.text_input("Recipient name (optional)")
        company = st.text_input("Company")
        role = st.text_input("Role")
        go = st.form_submit_button("Write message", type="primary")
    if go:
        if not company or not role:
            st.warning("Company and role are required.")
            return
        with st.spinner("Writing…"):
            message = _ai().generate_networking_message(kind, target, company, role, state.profile)
        st.text_area("Message", message, height=240)


# ── Page: Skill Gap ──────────────────────────────────────────────────────


def page_skill_gap() -> None:
    state = _state()
    st.header("Skill Gap")
    if st.button("Analyze my skill gap", type="primary"):
        with st.spinner("Analyzing…"):
            st.session_state["skill_gap"] = _ai().analyze_skill_gap(state.profile)
    gap = st.session_state.get("skill_gap")
    if gap is None:
        return
    st.markdown("**Missing skills:** " + (", ".join(gap.missing_skills) or "none"))
    for step in gap.learning_path:
        with st.container(border=True):
            st.markdown(f"**{step.skill}**  \n📚 {step.resource}  \n✅ {step.action_item}")
    st.markdown("**Capstone project**")
    st.info(gap.project_idea)


# ── Main ─────────────────────────────────────────────────────────────────


def _sidebar() -> None:
    with st.sidebar:
        pilot = _autopilot()
        st.markdown("**Status**")
        st.markdown(f"{'✅' if get_api_key() else '⬜'}  LLM API key")
        st.markdown(f"{'🟢' if pilot.is_running else '⚪'}  AutoPilot {'running' if pilot.is_running else 'idle'}")
        mode = st.session_state["settings"]["ai"]["mode"]
        st.caption(f"AI mode: {mode}" + (" (errors surface)" if mode == AI_MODE_STRICT else " (offline fallback)"))
        st.divider()
        if st.button("🗑️ Reset Data", use_container_width=True):
            st.session_state["store"].clear()
            for key in list(st.session_state.keys()):
                del st.session_state[key]
            st.success("All data cleared.")
            st.rerun()


def _wrap(page):
    def run() -> None:
        st.markdown(_GLASS_CSS, unsafe_allow_html=True)
        _init_session()
        _sidebar()
        page()

    run.__name__ = page.__name__
    return run


pages = [
    st.Page(_wrap(page_dashboard), title="Dashboard", icon="📊", url_path="dashboard", default=True),
    st.Page(_wrap(page_profile), title="Profile", icon="👤", url_path="profile"),
    st.Page(_wrap(page_discovery), title="Discovery", icon="🔍", url_path="discovery"),
    st.Page(_wrap(page_autopilot), title="AutoPilot", icon="🤖", url_path="autopilot"),
    st.Page(_wrap(page_pipeline), title="Pipeline", icon="🗂️", url_path="pipeline"),
    st.Page(_wrap(page_optimizer), title="Optimizer", icon="📝", url_path="optimizer"),
    st.Page(_wrap(page_interview), title="Interview Prep", icon="🧠", url_path="interview"),
    st.Page(_wrap(page_networking), title="Networking", icon="🤝", url_path="networking"),
    st.Page(_wrap(page_skill_gap), title="Skill Gap", icon="🚀", url_path="skills"),
]

nav = st.navigation(pages)
nav.run()
