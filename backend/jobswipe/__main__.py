from jobswipe.main import main

main()
