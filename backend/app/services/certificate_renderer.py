"""
Certificate Renderer - HTML template to PNG via headless Chromium
"""

from typing import Dict, Any

from playwright.async_api import async_playwright

from app.core.config import settings
from app.core.exceptions import CertificateRenderError
from app.core.logging_config import logger


# Payload values are inserted as-is; CSS braces are doubled for str.format
CERTIFICATE_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
  body {{
    margin: 0;
    width: {width}px;
    height: {height}px;
    font-family: Georgia, 'Times New Roman', serif;
    background: #f7f9fc;
  }}
  .frame {{
    box-sizing: border-box;
    margin: 30px;
    height: calc(100% - 60px);
    border: 12px double #1f3a68;
    padding: 50px 70px;
    text-align: center;
    background: #ffffff;
  }}
  .company {{ font-size: 22px; letter-spacing: 6px; color: #1f3a68; text-transform: uppercase; }}
  .title {{ font-size: 54px; margin: 30px 0 10px; color: #111827; }}
  .subtitle {{ font-size: 20px; color: #4b5563; }}
  .name {{ font-size: 44px; margin: 30px 0; color: #b45309; border-bottom: 2px solid #d1d5db; display: inline-block; padding: 0 40px 8px; }}
  .body {{ font-size: 20px; color: #374151; line-height: 1.6; }}
  .internship {{ font-weight: bold; color: #1f3a68; }}
  .footer {{ margin-top: 50px; display: flex; justify-content: space-between; font-size: 15px; color: #6b7280; }}
</style>
</head>
<body>
  <div class="frame">
    <div class="company">{company}</div>
    <div class="title">Certificate of Completion</div>
    <div class="subtitle">This is to certify that</div>
    <div class="name">{internName}</div>
    <div class="body">
      has successfully completed the internship program
      <div class="internship">{internshipTitle}</div>
      from {startDate} to {endDate}
    </div>
    <div class="footer">
      <span>Certificate ID: {certificateId}</span>
      <span>Issued: {issuedDate}</span>
    </div>
  </div>
</body>
</html>
"""


def render_certificate_html(payload: Dict[str, Any]) -> str:
    """Fill the certificate template with the payload"""
    return CERTIFICATE_HTML.format(
        width=settings.CERT_VIEWPORT_WIDTH,
        height=settings.CERT_VIEWPORT_HEIGHT,
        company=payload.get("company", ""),
        internName=payload.get("internName", ""),
        internshipTitle=payload.get("internshipTitle", ""),
        startDate=str(payload.get("startDate", ""))[:10],
        endDate=str(payload.get("endDate", ""))[:10],
        certificateId=payload.get("certificateId", ""),
        issuedDate=str(payload.get("issuedDate", ""))[:10],
    )


async def render_certificate_png(payload: Dict[str, Any]) -> bytes:
    """
    Render the certificate to a full-page PNG.

    Raises:
        CertificateRenderError: if the browser fails to launch or capture
    """
    html = render_certificate_html(payload)
    certificate_id = payload.get("certificateId")

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True, args=["--no-sandbox"])
            try:
                page = await browser.new_page(viewport={
                    "width": settings.CERT_VIEWPORT_WIDTH,
                    "height": settings.CERT_VIEWPORT_HEIGHT,
                })
                await page.set_content(html, wait_until="networkidle")
                image = await page.screenshot(type="png", full_page=True)
            finally:
                await browser.close()
    except Exception as e:
        logger.error(f"[CertRender] Failed to render {certificate_id}: {e}")
        raise CertificateRenderError(str(e), certificate_id) from e

    logger.debug(f"[CertRender] Rendered {certificate_id} ({len(image)} bytes)")
    return image
