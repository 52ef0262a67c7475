"""CleverTap event upload API."""

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


class CleverTapAPIError(Exception):
    """CleverTap rejected an upload."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"CleverTap API error ({status_code}): {body}")


class CleverTapClient:
    """Uploads events to the region-specific CleverTap endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, url_template: str):
        self.http_client = http_client
        self.url_template = url_template

    def endpoint_for(self, region: str) -> str:
        return self.url_template.format(region=region)

    async def upload(
        self,
        account_id: str,
        passcode: str,
        region: str,
        records: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """
        Upload event/profile records.

        Args:
            account_id: CleverTap account id
            passcode: CleverTap account passcode
            region: Data center region (in1, us1, eu1, ...)
            records: Records for the ``d`` array

        Returns:
            dict: Parsed response body, empty when it is not JSON

        Raises:
            CleverTapAPIError: On any non-2xx response
        """
        response = await self.http_client.post(
            self.endpoint_for(region),
            headers={
                "X-CleverTap-Account-Id": account_id,
                "X-CleverTap-Passcode": passcode,
                "Content-Type": "application/json",
            },
            json={"d": records},
        )

        if not response.is_success:
            raise CleverTapAPIError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            return {}
