"""
AI Document Service - SRS drafts, task breakdowns and project descriptions

SRS documents go to OpenAI chat completions. Task breakdowns and project
descriptions go to Gemini. Responses are returned as raw model text.
"""

from typing import Optional

from openai import AsyncOpenAI
from google import genai

from app.core.config import settings
from app.core.exceptions import AIServiceError, AIConfigurationError
from app.core.logging_config import logger
from app.schemas.ai import SRSRequest, TaskGenerationRequest, DescriptionRequest


SRS_PROMPT = """
Generate a detailed Software Requirement Specification (SRS) document based on the following details:

**Project Name:** {project_name}

**Client Information:**
- **Client Name:** {client_name}
- **Contact Person:** {contact_person}
- **Email:** {client_email}

**1. Introduction:**
   1.1. **Project Overview:** {project_description}
   1.2. **Scope:** Define the scope of the project based on the requirements.
   1.3. **Target Audience:** {target_audience}

**2. Overall Description:**
   2.1. **Product Perspective:** Describe the product's relationship to other products or projects.
   2.2. **User Characteristics:** Describe the intended users.
   2.3. **Assumptions and Dependencies:** List any assumptions or dependencies.

**3. System Features and Requirements:**
   3.1. **Functional Requirements:**
        {functional_requirements}

   3.2. **Non-Functional Requirements:**
        {non_functional_requirements}

**4. External Interface Requirements:**
   4.1. **User Interfaces:** Describe the user interface requirements.
   4.2. **Hardware Interfaces:** Describe any hardware interfaces.
   4.3. **Software Interfaces:** Describe any software interfaces.
   4.4. **Communications Interfaces:** Describe any communications interfaces.

**5. Other Appendices:**
   - Include any other relevant information, such as a glossary, analysis models, or issues list.

Please generate a comprehensive and well-structured SRS document based on this information. The output should be in Markdown format.
"""

TASKS_PROMPT = """You are a project manager at a software agency in India.
Break the following project into concrete development tasks.

Project Name: {project_name}
Client: {client_name}
Project Goal and Requirements:
{project_goal}

Total Budget: INR {total_budget}
Fixed Costs: INR {fixed_costs}
Budget available for tasks: INR {task_budget}

Return ONLY a JSON array. Each element must have:
- "task_title": short title
- "task_description": what needs to be done
- "estimated_effort_hours": number
- "estimated_cost_in_INR": number

The sum of estimated_cost_in_INR must not exceed the budget available for tasks.
"""

DESCRIPTION_PROMPT = """Write a clear, professional project description for a software project.

Project Name: {project_name}
Requirements:
{requirements}

The description should be 2-3 short paragraphs covering the goal, the main features and the expected outcome.
Return only the description text.
"""


class AIDocumentService:
    """Generate business documents with OpenAI and Gemini"""

    def __init__(self):
        self._openai_client: Optional[AsyncOpenAI] = None
        self._gemini_client: Optional[genai.Client] = None

    def _get_openai(self) -> AsyncOpenAI:
        if not settings.OPENAI_API_KEY:
            raise AIConfigurationError("OpenAI")
        if self._openai_client is None:
            self._openai_client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        return self._openai_client

    def _get_gemini(self) -> genai.Client:
        if not settings.GEMINI_API_KEY:
            raise AIConfigurationError("Gemini")
        if self._gemini_client is None:
            self._gemini_client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._gemini_client

    def build_srs_prompt(self, request: SRSRequest) -> str:
        client = request.client
        return SRS_PROMPT.format(
            project_name=request.project_name,
            client_name=(client.client_name if client else None) or "N/A",
            contact_person=(client.contact_person if client else None) or "N/A",
            client_email=(client.email if client else None) or "N/A",
            project_description=request.project_description
            or "Provide a detailed overview of the project.",
            target_audience=request.target_audience
            or "Describe the target audience for this project.",
            functional_requirements=request.functional_requirements
            or "Detail the functional requirements. These should be specific and measurable.",
            non_functional_requirements=request.non_functional_requirements
            or "Detail the non-functional requirements, such as performance, security, reliability, and usability.",
        )

    def build_tasks_prompt(self, request: TaskGenerationRequest, client_name: Optional[str] = None) -> str:
        return TASKS_PROMPT.format(
            project_name=request.project_name,
            client_name=client_name or "N/A",
            project_goal=request.project_goal,
            total_budget=request.total_budget_in_inr,
            fixed_costs=request.fixed_costs_in_inr,
            task_budget=max(0, request.total_budget_in_inr - request.fixed_costs_in_inr),
        )

    def build_description_prompt(self, request: DescriptionRequest) -> str:
        return DESCRIPTION_PROMPT.format(
            project_name=request.project_name or "N/A",
            requirements=request.requirements,
        )

    async def _complete_openai(self, prompt: str) -> str:
        client = self._get_openai()
        try:
            response = await client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=settings.AI_TEMPERATURE,
            )
        except Exception as e:
            logger.error(f"[AI/OpenAI] Request failed: {type(e).__name__}: {e}")
            raise AIServiceError("Failed to generate document", provider="OpenAI") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AIServiceError("OpenAI returned an empty response", provider="OpenAI")
        return content

    async def _complete_gemini(self, prompt: str) -> str:
        client = self._get_gemini()
        try:
            response = await client.aio.models.generate_content(
                model=settings.GEMINI_MODEL,
                contents=prompt,
            )
        except Exception as e:
            logger.error(f"[AI/Gemini] Request failed: {type(e).__name__}: {e}")
            raise AIServiceError("Failed to generate content", provider="Gemini") from e

        text = (response.text or "").strip()
        if not text:
            raise AIServiceError("Gemini returned an empty response", provider="Gemini")
        return text

    async def generate_srs(self, request: SRSRequest) -> str:
        """SRS document in Markdown"""
        logger.info(f"[AI] Generating SRS for {request.project_name}")
        return await self._complete_openai(self.build_srs_prompt(request))

    async def generate_tasks(self, request: TaskGenerationRequest, client_name: Optional[str] = None) -> str:
        """Task breakdown as raw model text (a JSON array when the model complies)"""
        logger.info(f"[AI] Generating tasks for {request.project_name}")
        return await self._complete_gemini(self.build_tasks_prompt(request, client_name))

    async def generate_description(self, request: DescriptionRequest) -> str:
        logger.info(f"[AI] Generating description for {request.project_name or 'unnamed project'}")
        return await self._complete_gemini(self.build_description_prompt(request))


# Singleton instance
ai_document_service = AIDocumentService()
