import sys
import logging
import argparse

from color_cluster import create_color_clusters
from color_extract import extract_color_ranking
from frame_source import VideoFrameSource
from palette_config import PaletteSettings, configure_logging, get_defaults
from palette_errors import DecodeError, PaletteError
from palette_report import print_color_clusters, print_color_palette, save_palette_swatch

logger = logging.getLogger(__name__)


class VideoPaletteExtractor:
    """동영상 구간 → 색상 빈도 랭킹 → 가중 K-Means 클러스터 파이프라인"""

    def __init__(self, settings):
        self.settings = settings.validate()

    def extract(self):
        s = self.settings
        with VideoFrameSource(s.video, s.start_time, s.end_time) as source:
            print(f"[*] 색상 추출 시작: {s.video} "
                  f"({source.frame_total} 프레임, 리사이즈 높이 {s.sample_height}, "
                  f"채도 ≥ {s.saturation}, 명도 ≥ {s.luminance})")
            try:
                ranking = extract_color_ranking(
                    source, s.sample_height, s.saturation, s.luminance,
                    frame_total=source.frame_total, show_progress=s.show_progress)
            except DecodeError as e:
                logger.error("decode failed after %d frames", e.frames_processed)
                raise
        print(f"[*] 색상 추출 완료: 고유 색상 {len(ranking)}개")
        return ranking

    def run(self):
        s = self.settings
        ranking = self.extract()
        clusters = create_color_clusters(ranking, s.num_clusters, seed=s.seed)

        # 결과 출력 전에 스와치를 먼저 저장해 실패 시 부분 출력이 남지 않도록 함
        if s.swatch_path:
            save_palette_swatch(clusters, s.swatch_path)

        print_color_palette(ranking, top=s.top_colors)
        print_color_clusters(clusters)
        if s.swatch_path:
            print(f"[!] 팔레트 이미지 저장 완료: {s.swatch_path}")
        return ranking, clusters


def build_parser():
    d = get_defaults()
    parser = argparse.ArgumentParser(description="Extracts the color palette from a video")
    parser.add_argument("video", metavar="FILE", help="색상을 추출할 입력 동영상")
    parser.add_argument("-s", "--saturation", type=float, default=d.saturation, help="채도 임계값 (0.0~1.0)")
    parser.add_argument("-l", "--luminance", type=float, default=d.luminance, help="명도 임계값 (0.0~1.0)")
    parser.add_argument("-r", "--resize-height", type=int, default=d.sample_height, help="프레임 축소 높이 (종횡비 유지)")
    parser.add_argument("-c", "--color-clusters", type=int, default=d.num_clusters, help="생성할 색상 클러스터 수")
    parser.add_argument("--start", default=None, help="추출 시작 시간 (예: 00:00:15)")
    parser.add_argument("--end", default=None, help="추출 종료 시간 (예: 00:00:30)")
    parser.add_argument("--seed", type=int, default=d.seed, help="K-Means 초기화 시드")
    parser.add_argument("--top", type=int, default=10, help="출력할 상위 색상 개수")
    parser.add_argument("--swatch", default=None, help="클러스터 팔레트 PNG 저장 경로")
    parser.add_argument("--no-progress", action="store_true", help="진행률 표시 끄기")
    parser.add_argument("--log-level", default=d.log_level, help="로그 레벨 (DEBUG, INFO, ...)")
    return parser


def main(argv=None):
    try:
        args = build_parser().parse_args(argv)
        configure_logging(args.log_level)
        settings = PaletteSettings(
            video=args.video,
            sample_height=args.resize_height,
            saturation=args.saturation,
            luminance=args.luminance,
            num_clusters=args.color_clusters,
            start_time=args.start,
            end_time=args.end,
            seed=args.seed,
            top_colors=args.top,
            swatch_path=args.swatch,
            show_progress=not args.no_progress,
            log_level=args.log_level,
        )
        VideoPaletteExtractor(settings).run()
    except PaletteError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
