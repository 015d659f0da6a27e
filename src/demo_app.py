# 데모 웹앱 - GET / 인사말, GET /health 헬스체크
# Flask 앱 + Werkzeug 서버, 설정은 환경변수(SERVER_ADDRESS, SERVER_PORT)
import logging
import os
import socket
import sys
from dataclasses import dataclass
from types import MappingProxyType

from flask import Flask, Response
from werkzeug.serving import get_sockaddr, make_server, select_address_family

logger = logging.getLogger('demo_app')

GREETING = 'Hello from Spring Boot on Java 21! This is created By SHIVAM SINGH & SUJIT DUTTA'
HEALTH_OK = 'OK'

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8080
LISTEN_BACKLOG = 128


class DemoAppError(Exception):
    """앱 기동 관련 오류의 기본 클래스"""


class ConfigError(DemoAppError):
    """잘못된 환경변수 설정"""


class StartupError(DemoAppError):
    """리스닝 소켓 바인드 실패"""


@dataclass(frozen=True)
class Config:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ=None):
        """SERVER_ADDRESS / SERVER_PORT 환경변수에서 설정 로드"""
        if environ is None:
            environ = os.environ
        host = environ.get('SERVER_ADDRESS') or DEFAULT_HOST
        raw_port = environ.get('SERVER_PORT') or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f'SERVER_PORT must be an integer, got {raw_port!r}') from None
        if not 0 <= port <= 65535:
            raise ConfigError(f'SERVER_PORT out of range: {port}')
        return cls(host=host, port=port)


# 메인 페이지
def root():
    return Response(GREETING, mimetype='text/plain')


# 헬스체크 엔드포인트 - Kubernetes liveness/readiness probe용
def health():
    return Response(HEALTH_OK, mimetype='text/plain')


# 라우트 테이블: (메서드, 경로) -> 핸들러
ROUTES = MappingProxyType({
    ('GET', '/'): root,
    ('GET', '/health'): health,
})


def create_app(config=None):
    """ROUTES 를 등록한 Flask 앱 생성"""
    app = Flask(__name__, static_folder=None)
    app.config['DEMO_APP'] = config or Config()
    for (method, path), view in ROUTES.items():
        # OPTIONS 자동 응답 없음 -> GET 외 메서드는 405
        app.add_url_rule(
            path,
            endpoint=view.__name__,
            view_func=view,
            methods=[method],
            provide_automatic_options=False,
        )
    return app


def bind(config: Config, app=None):
    """리스닝 소켓을 바인드하고 스레드형 WSGI 서버 반환 (실패 시 StartupError)"""
    if app is None:
        app = create_app(config)
    sock = None
    try:
        family = select_address_family(config.host, config.port)
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(get_sockaddr(config.host, config.port, family))
        sock.listen(LISTEN_BACKLOG)
    except OSError as e:
        if sock is not None:
            sock.close()
        raise StartupError(f'Cannot bind {config.host}:{config.port}: {e.strerror or e}') from e
    try:
        return make_server(config.host, config.port, app, threaded=True, fd=sock.fileno())
    finally:
        # make_server 가 fd 를 복제하므로 원본은 닫음
        sock.close()


def serve(config: Config, app=None):
    """바인드 성공 후 배너 출력, 종료될 때까지 요청 처리"""
    server = bind(config, app)
    host, port = server.socket.getsockname()[:2]
    print('데모 웹앱 서버 시작')
    print('API 엔드포인트:')
    print('- GET  /          # 인사말')
    print('- GET  /health    # 헬스체크')
    logger.info('Listening on %s:%s', host, port)
    server.serve_forever()


def main(argv=None):
    # 프로세스 인자는 사용하지 않음
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    try:
        serve(Config.from_env())
    except DemoAppError as e:
        logger.error('Startup failed: %s', e)
        return 1
    return 0


# gunicorn demo_app:app 등 WSGI 서버용
app = create_app()


if __name__ == '__main__':
    sys.exit(main())
