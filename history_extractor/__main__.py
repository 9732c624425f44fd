from history_extractor.main import main

main()
