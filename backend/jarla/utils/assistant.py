"""Fetch, transform, respond pipelines behind the /api/assistant routes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from flask import current_app

from jarla.utils import ai_gateway, scraping
from jarla.utils.prompts import (
    AUDIENCE_TYPES,
    CAMPAIGN_CHAT_MODEL,
    CAMPAIGN_CHAT_PROMPT,
    COMPANY_PROFILE_MODELS,
    COMPANY_PROFILE_PROMPTS,
    COMPANY_PROFILE_USER_PROMPTS,
    COMPANY_RESEARCH_MODEL,
    COMPANY_RESEARCH_PROMPT,
    EXTRACT_BUSINESS_INFO_TOOL,
    WEBSITE_ANALYSIS_MODEL,
    WEBSITE_ANALYST_PROMPT,
)

BUSY_REPLY = "I'm getting a lot of questions right now. Let me think for a moment..."
CREDITS_REPLY = "Let's continue with your campaign - I can help you refine the details!"
FALLBACK_REPLY = "I'd love to help with that! Could you tell me more about what you're looking for?"
FORM_UPDATED_REPLY = "I've updated the form for you!"

WEBSITE_CONTENT_LIMIT = 15000
SOURCE_CONTENT_LIMIT = 8000
COMBINED_CONTENT_LIMIT = 30000


def history_messages(history: Any) -> List[Dict[str, str]]:
    """Map stored chat turns onto gateway roles (the assistant speaks as "jarla")."""
    out = []
    if not isinstance(history, list):
        return out
    for msg in history:
        if not isinstance(msg, dict):
            continue
        out.append({
            "role": "assistant" if msg.get("role") in ("jarla", "assistant") else "user",
            "content": str(msg.get("content") or ""),
        })
    return out


def campaign_context(business: Optional[dict], company_name: str = "", form: Optional[dict] = None) -> str:
    parts = []
    if business:
        lines = [f"- Company: {business.get('company_name') or company_name or 'Unknown'}"]
        for key, label in (
            ("website", "Website"),
            ("description", "Description"),
            ("industry", "Industry"),
            ("target_audience", "Target Audience"),
            ("brand_values", "Brand Values"),
        ):
            if business.get(key):
                lines.append(f"- {label}: {business[key]}")
        parts.append(
            "## Business You're Helping\n" + "\n".join(lines)
            + "\n\nYou already know this company from their profile. Reference specifics instead of asking for them."
        )
    elif company_name:
        parts.append(f"You're currently helping {company_name}.")

    if form:
        requirements = [str(r).strip() for r in (form.get("requirements") or []) if str(r).strip()]
        parts.append(
            "## Current Campaign Form State\n"
            f"- Title: {form.get('title') or '(empty)'}\n"
            f"- Description: {form.get('description') or '(empty)'}\n"
            f"- Budget: {form.get('total_budget') or 0} SEK\n"
            f"- Deadline: {form.get('deadline') or '(not set)'}\n"
            f"- Requirements: {', '.join(requirements) or '(none)'}\n\n"
            "The user can see this form. Update the relevant fields when they ask for changes."
        )
    return "\n\n".join(parts)


def campaign_chat(message: str, history: Any = None, business: Optional[dict] = None,
                  company_name: str = "", form: Optional[dict] = None) -> dict:
    """Campaign-drafting chat. Always answers with {response, formUpdates}."""
    context = campaign_context(business, company_name, form)
    system = CAMPAIGN_CHAT_PROMPT + ("\n\n" + context if context else "")
    messages = [{"role": "system", "content": system}] + history_messages(history)
    messages.append({"role": "user", "content": message})

    result = ai_gateway.chat_completion(messages, CAMPAIGN_CHAT_MODEL, max_tokens=500)
    if not result["ok"]:
        if result.get("status") == 429:
            return {"response": BUSY_REPLY, "formUpdates": None}
        if result.get("status") == 402:
            return {"response": CREDITS_REPLY, "formUpdates": None}
        current_app.logger.error("campaign chat failed: %s", result.get("error"))
        return {"response": FALLBACK_REPLY, "formUpdates": None}

    raw = ai_gateway.message_content(result["data"]) or '{"message": "Let me help you with that - can you rephrase your question?"}'
    parsed = ai_gateway.parse_json_reply(raw)
    text = ai_gateway.strip_embedded_json(str(parsed.get("message") or ""))
    form_updates = parsed.get("formUpdates")
    return {
        "response": text or FORM_UPDATED_REPLY,
        "formUpdates": form_updates if isinstance(form_updates, dict) else None,
    }


def company_research(message: str, history: Any = None) -> dict:
    """Research a company from its name. Answers with {response, profileUpdates}."""
    messages = [{"role": "system", "content": COMPANY_RESEARCH_PROMPT}] + history_messages(history)
    messages.append({"role": "user", "content": message})

    result = ai_gateway.chat_completion(messages, COMPANY_RESEARCH_MODEL, max_tokens=800)
    if not result["ok"]:
        if result.get("status") == 429:
            return {"response": "Give me a moment, I'm a bit busy right now...", "profileUpdates": None}
        current_app.logger.error("company research failed: %s", result.get("error"))
        return {"response": "Something went wrong. Could you try again?", "profileUpdates": None}

    raw = ai_gateway.message_content(result["data"]) or '{"message": "Could you tell me your company name?"}'
    parsed = ai_gateway.parse_json_reply(raw)
    updates = parsed.get("profileUpdates")
    return {
        "response": parsed.get("message") or "Could you tell me more?",
        "profileUpdates": updates if isinstance(updates, dict) else None,
    }


def _failure(error: str, status: int) -> Tuple[dict, int]:
    return {"success": False, "error": error}, status


def analyze_website(url: str) -> Tuple[dict, int]:
    if not (url or "").strip():
        return _failure("URL is required", 400)
    if not scraping.is_configured():
        current_app.logger.error("FIRECRAWL_API_KEY not configured")
        return _failure("Firecrawl not configured", 500)
    if not ai_gateway.is_configured():
        current_app.logger.error("AI gateway not configured")
        return _failure("AI service not configured", 500)

    content = scraping.scrape_markdown(scraping.format_url(url))
    if not content:
        return _failure("No content found on website", 400)

    messages = [
        {"role": "system", "content": WEBSITE_ANALYST_PROMPT.format(audience_types=", ".join(AUDIENCE_TYPES))},
        {"role": "user", "content": "Analyze this website content and extract business information:\n\n" + content[:WEBSITE_CONTENT_LIMIT]},
    ]
    result = ai_gateway.chat_completion(
        messages,
        WEBSITE_ANALYSIS_MODEL,
        tools=[EXTRACT_BUSINESS_INFO_TOOL],
        tool_choice={"type": "function", "function": {"name": "extract_business_info"}},
    )
    if not result["ok"]:
        if result.get("status") == 429:
            return _failure("Rate limit exceeded, please try again later", 429)
        return _failure("AI analysis failed", 500)

    info = ai_gateway.first_tool_call(result["data"], "extract_business_info")
    if info is None:
        current_app.logger.error("no extract_business_info tool call in AI response")
        return _failure("AI did not return structured data", 500)

    audience = info.get("audienceTypes") or []
    info["audienceTypes"] = [a for a in audience if a in AUDIENCE_TYPES]
    return {"success": True, "data": info}, 200


def analyze_company(website: str, social_media: Optional[dict], company_name: str, language: str = "en") -> Tuple[dict, int]:
    socials = [(platform, url) for platform, url in (social_media or {}).items() if url]
    if not (website or "").strip() and not socials:
        return _failure("Website or social media URLs are required", 400)
    if not scraping.is_configured():
        current_app.logger.error("FIRECRAWL_API_KEY not configured")
        return _failure("Firecrawl not configured", 500)
    if not ai_gateway.is_configured():
        current_app.logger.error("AI gateway not configured")
        return _failure("AI service not configured", 500)

    parts: List[Tuple[str, str]] = []
    logo = None
    if website:
        content = scraping.scrape_markdown(website)
        if content:
            parts.append(("Website", content))
        logo = scraping.find_logo(website)
    for platform, url in socials:
        content = scraping.scrape_markdown(url)
        if content:
            parts.append((platform, content))

    if not parts:
        return _failure("Could not retrieve content from any source", 400)

    combined = "\n\n".join(f"=== {source.upper()} ===\n{content[:SOURCE_CONTENT_LIMIT]}" for source, content in parts)
    lang = "sv" if language == "sv" else "en"
    messages = [
        {"role": "system", "content": COMPANY_PROFILE_PROMPTS[lang].format(company=company_name)},
        {"role": "user", "content": COMPANY_PROFILE_USER_PROMPTS[lang].format(company=company_name, content=combined[:COMBINED_CONTENT_LIMIT])},
    ]
    result = ai_gateway.chat_with_fallback(COMPANY_PROFILE_MODELS, messages, retries=1)
    if not result["ok"]:
        current_app.logger.error("all AI models failed: %s", result.get("error"))
        if result.get("error") == "payment_required":
            return _failure("AI credits exhausted", 402)
        return _failure("AI analysis failed after retries", 500)

    summary = ai_gateway.message_content(result["data"])
    if not summary:
        return _failure("AI did not return a summary", 500)

    return {
        "success": True,
        "data": {
            "summary": summary,
            "sourcesAnalyzed": [source for source, _ in parts],
            "logo": logo,
        },
    }, 200
