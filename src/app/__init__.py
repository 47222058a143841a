"""
App layer: HTTP 서버 (FastAPI).

역할:
- 라우트 (health / summarize / chat / generate-avatar)
- 미들웨어 (origin gate, rate limit, 보안 헤더)
- 업스트림 호출 (providers) + 응답 해석 (services)
- ⚠️ 설정/origin 규칙은 core, 에러/상수는 domain에 둔다
"""
